import logging

from fastapi import APIRouter, Depends

from marketplace.api.deps import get_store
from marketplace.schemas.response import AppointmentOut, LeadOut
from marketplace.session import SessionContext, require_business_owner
from marketplace.store import RecordStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/leads", response_model=list[LeadOut])
async def get_leads(
    session: SessionContext = Depends(require_business_owner),
    store: RecordStore = Depends(get_store),
):
    """Quote requests received by the caller's business, newest first."""
    logger.info(f"GET /dashboard/leads for profile {session.profile_id}")
    leads = await store.leads_for(session.profile_id)
    return [LeadOut.model_validate(lead, from_attributes=True) for lead in leads]


@router.get("/appointments", response_model=list[AppointmentOut])
async def get_appointments(
    session: SessionContext = Depends(require_business_owner),
    store: RecordStore = Depends(get_store),
):
    logger.info(f"GET /dashboard/appointments for profile {session.profile_id}")
    appointments = await store.appointments_for(session.profile_id)
    return [
        AppointmentOut.model_validate(appointment, from_attributes=True)
        for appointment in appointments
    ]
