import logging

from fastapi import APIRouter, Depends, HTTPException

from marketplace.api.deps import get_store
from marketplace.carousel.machine import (
    PROFILE_CAROUSEL,
    CarouselConfig,
    Mount,
    initial_state,
    transition,
)
from marketplace.models import Appointment, Lead, Profile
from marketplace.schemas.request import CreateAppointment, CreateLead
from marketplace.schemas.response import (
    AppointmentOut,
    CarouselSnapshot,
    LeadOut,
    ProfileDetail,
)
from marketplace.search.mapper import profile_to_professional
from marketplace.store import RecordStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/profiles", tags=["profiles"])


def carousel_snapshot(media, cfg: CarouselConfig) -> CarouselSnapshot:
    state, _ = transition(initial_state(media), Mount(), cfg)
    return CarouselSnapshot(
        media=list(state.media),
        index=state.index,
        mode=state.mode.value,
        progress=state.progress,
        muted=state.muted,
        duration_ms=cfg.duration_ms,
        tick_ms=cfg.tick_ms,
        wraps=cfg.wraps,
    )


async def _active_profile(store: RecordStore, profile_id: str) -> Profile:
    profile = await store.get(profile_id)
    if profile is None or not profile.is_active:
        raise HTTPException(status_code=404, detail="Profile not found")
    return profile


@router.get("/{profile_id}", response_model=ProfileDetail)
async def get_profile(profile_id: str, store: RecordStore = Depends(get_store)):
    """Get the public profile page of an active listing."""
    logger.info(f"GET /profiles/{profile_id}")
    profile = await _active_profile(store, profile_id)
    professional = profile_to_professional(profile)

    return ProfileDetail(
        professional=professional,
        phone=profile.phone,
        whatsapp=profile.whatsapp,
        address=profile.address,
        website_url=profile.website_url,
        carousel=carousel_snapshot(professional.media, PROFILE_CAROUSEL),
    )


@router.post("/{profile_id}/leads", response_model=LeadOut, status_code=201)
async def create_lead(
    profile_id: str, body: CreateLead, store: RecordStore = Depends(get_store)
):
    """Send a project-quote request to a professional."""
    logger.info(f"POST /profiles/{profile_id}/leads")
    await _active_profile(store, profile_id)
    lead = await store.add_lead(Lead(profile_id=profile_id, **body.model_dump()))
    return LeadOut.model_validate(lead, from_attributes=True)


@router.post(
    "/{profile_id}/appointments", response_model=AppointmentOut, status_code=201
)
async def create_appointment(
    profile_id: str, body: CreateAppointment, store: RecordStore = Depends(get_store)
):
    """Request an appointment slot with a professional."""
    logger.info(f"POST /profiles/{profile_id}/appointments")
    await _active_profile(store, profile_id)
    appointment = await store.add_appointment(
        Appointment(profile_id=profile_id, **body.model_dump())
    )
    return AppointmentOut.model_validate(appointment, from_attributes=True)
