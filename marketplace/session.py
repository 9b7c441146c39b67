"""
Per-request session capabilities.

Authentication happens upstream; the gateway forwards the authenticated user
id in ``X-User-Id``. Capabilities are resolved once per request and shared by
every dependency that needs them.
"""
import logging
from dataclasses import dataclass

from fastapi import Depends, Header, HTTPException

from marketplace.api.deps import get_store
from marketplace.store import RecordStore, RecordStoreError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionContext:
    user_id: str | None = None
    is_authenticated: bool = False
    is_business_owner: bool = False
    is_admin: bool = False
    profile_id: str | None = None


ANONYMOUS = SessionContext()


async def resolve_session(store: RecordStore, user_id: str | None) -> SessionContext:
    if not user_id:
        return ANONYMOUS

    try:
        is_admin = await store.is_admin(user_id)
        profile = await store.profile_for_owner(user_id)
    except RecordStoreError as e:
        # Capabilities degrade to a plain authenticated user
        logger.error(f"Failed to resolve capabilities for {user_id}: {e}")
        return SessionContext(user_id=user_id, is_authenticated=True)

    return SessionContext(
        user_id=user_id,
        is_authenticated=True,
        is_business_owner=profile is not None,
        is_admin=is_admin,
        profile_id=profile.id if profile is not None else None,
    )


async def get_session(
    x_user_id: str | None = Header(default=None),
    store: RecordStore = Depends(get_store),
) -> SessionContext:
    return await resolve_session(store, x_user_id)


def require_authenticated(
    session: SessionContext = Depends(get_session),
) -> SessionContext:
    if not session.is_authenticated:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return session


def require_admin(
    session: SessionContext = Depends(require_authenticated),
) -> SessionContext:
    if not session.is_admin:
        raise HTTPException(status_code=403, detail="Not authorized")
    return session


def require_business_owner(
    session: SessionContext = Depends(require_authenticated),
) -> SessionContext:
    if not session.is_business_owner:
        raise HTTPException(status_code=403, detail="No business profile")
    return session
