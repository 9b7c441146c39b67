import logging

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from marketplace.api.deps import get_storage, get_store
from marketplace.media import is_video_url
from marketplace.models import Profile
from marketplace.schemas.request import AppendMedia, DeleteMedia, UpdateProfileFlags
from marketplace.schemas.response import (
    AdminProfileRow,
    AdminProfilesResponse,
    AdminStats,
    MediaUpdateResponse,
    UploadBatchResponse,
)
from marketplace.session import SessionContext, require_admin
from marketplace.storage import LocalMediaStorage, MediaUpload, StorageError, upload_batch
from marketplace.store import RecordStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])


def _to_row(profile: Profile) -> AdminProfileRow:
    return AdminProfileRow(
        id=profile.id,
        business_name=profile.business_name,
        city=profile.city,
        service_type=getattr(profile.service_type, "value", profile.service_type),
        is_active=profile.is_active,
        is_verified=profile.is_verified,
        has_video=any(is_video_url(url) for url in profile.media_urls or []),
        media_urls=list(profile.media_urls or []),
    )


async def _get_profile(store: RecordStore, profile_id: str) -> Profile:
    profile = await store.get(profile_id)
    if profile is None:
        raise HTTPException(status_code=404, detail="Profile not found")
    return profile


@router.get("/profiles", response_model=AdminProfilesResponse)
async def list_profiles(
    session: SessionContext = Depends(require_admin),
    store: RecordStore = Depends(get_store),
):
    """All profiles, inactive ones included, with moderation stats."""
    logger.info(f"GET /admin/profiles by {session.user_id}")
    rows = [_to_row(profile) for profile in await store.all_profiles()]

    return AdminProfilesResponse(
        profiles=rows,
        stats=AdminStats(
            total=len(rows),
            active=sum(row.is_active for row in rows),
            verified=sum(row.is_verified for row in rows),
            with_video=sum(row.has_video for row in rows),
        ),
    )


@router.patch("/profiles/{profile_id}", response_model=AdminProfileRow)
async def update_profile_flags(
    profile_id: str,
    body: UpdateProfileFlags,
    session: SessionContext = Depends(require_admin),
    store: RecordStore = Depends(get_store),
):
    """Activate, deactivate, verify or unverify a profile."""
    logger.info(f"PATCH /admin/profiles/{profile_id} by {session.user_id}: {body}")
    profile = await _get_profile(store, profile_id)

    if body.is_active is not None:
        profile.is_active = body.is_active
    if body.is_verified is not None:
        profile.is_verified = body.is_verified

    return _to_row(await store.save(profile))


@router.post("/profiles/{profile_id}/media", response_model=MediaUpdateResponse)
async def append_media(
    profile_id: str,
    body: AppendMedia,
    session: SessionContext = Depends(require_admin),
    store: RecordStore = Depends(get_store),
):
    """Append already-uploaded media URLs to a profile."""
    logger.info(f"POST /admin/profiles/{profile_id}/media by {session.user_id}")
    profile = await _get_profile(store, profile_id)
    profile.media_urls = list(profile.media_urls or []) + body.media_urls
    profile = await store.save(profile)
    return MediaUpdateResponse(profile_id=profile.id, media_urls=profile.media_urls)


@router.delete("/profiles/{profile_id}/media", response_model=MediaUpdateResponse)
async def delete_media(
    profile_id: str,
    body: DeleteMedia,
    session: SessionContext = Depends(require_admin),
    store: RecordStore = Depends(get_store),
    storage: LocalMediaStorage = Depends(get_storage),
):
    """Remove a media URL from a profile and delete the stored object if we own it."""
    logger.info(f"DELETE /admin/profiles/{profile_id}/media by {session.user_id}")
    profile = await _get_profile(store, profile_id)
    if body.url not in (profile.media_urls or []):
        raise HTTPException(status_code=404, detail="Media not found on profile")

    profile.media_urls = [url for url in profile.media_urls if url != body.url]
    profile = await store.save(profile)

    if storage.path_from_url(body.url) is not None:
        try:
            await storage.remove(body.url)
        except StorageError as e:
            logger.warning(f"Could not delete {body.url} from storage: {e}")

    return MediaUpdateResponse(profile_id=profile.id, media_urls=profile.media_urls)


@router.post("/profiles/{profile_id}/uploads", response_model=UploadBatchResponse)
async def upload_media(
    profile_id: str,
    files: list[UploadFile] = File(...),
    session: SessionContext = Depends(require_admin),
    store: RecordStore = Depends(get_store),
    storage: LocalMediaStorage = Depends(get_storage),
):
    """Upload files to storage and append every successful one to the profile."""
    logger.info(
        f"POST /admin/profiles/{profile_id}/uploads by {session.user_id}: {len(files)} files"
    )
    profile = await _get_profile(store, profile_id)

    uploads = [
        MediaUpload(
            filename=file.filename or "upload",
            content_type=file.content_type or "application/octet-stream",
            payload=await file.read(),
        )
        for file in files
    ]
    results = await upload_batch(storage, profile_id, uploads)

    new_urls = [line.url for line in results if line.success]
    if new_urls:
        profile.media_urls = list(profile.media_urls or []) + new_urls
        profile = await store.save(profile)

    succeeded = len(new_urls)
    return UploadBatchResponse(
        succeeded=succeeded,
        failed=len(results) - succeeded,
        results=results,
        media_urls=list(profile.media_urls or []),
    )
