"""
Record store access.

``RecordStore`` is the asynchronous, fallible service the search pipeline and
the API talk to. ``SqlRecordStore`` runs SQLModel queries on the PostgreSQL
engine in a worker thread; ``MemoryRecordStore`` keeps records in process and
evaluates the same predicates in Python.
"""
import logging
from abc import ABC, abstractmethod
from datetime import datetime

from fastapi.concurrency import run_in_threadpool
from sqlalchemy import func
from sqlmodel import select

from marketplace.database import DatabaseError, get_db_session
from marketplace.models import Admin, Appointment, Lead, Profile
from marketplace.search.predicates import Predicate, apply_predicates, matches_all

logger = logging.getLogger(__name__)


class RecordStoreError(DatabaseError):
    """Raised when the record store cannot answer a request."""


class RecordStore(ABC):
    @abstractmethod
    async def count(self, predicates: list[Predicate]) -> int: ...

    @abstractmethod
    async def fetch(
        self, predicates: list[Predicate], offset: int, limit: int
    ) -> list[Profile]:
        """Return profiles matching every predicate, best rated first."""

    @abstractmethod
    async def get(self, profile_id: str) -> Profile | None: ...

    @abstractmethod
    async def save(self, profile: Profile) -> Profile: ...

    @abstractmethod
    async def all_profiles(self) -> list[Profile]: ...

    @abstractmethod
    async def profile_for_owner(self, owner_id: str) -> Profile | None: ...

    @abstractmethod
    async def is_admin(self, user_id: str) -> bool: ...

    @abstractmethod
    async def add_lead(self, lead: Lead) -> Lead: ...

    @abstractmethod
    async def add_appointment(self, appointment: Appointment) -> Appointment: ...

    @abstractmethod
    async def leads_for(self, profile_id: str) -> list[Lead]: ...

    @abstractmethod
    async def appointments_for(self, profile_id: str) -> list[Appointment]: ...


def _rating_order(profile: Profile):
    return (-(profile.rating or 0.0), profile.id)


class SqlRecordStore(RecordStore):
    async def _run(self, operation, *args):
        try:
            return await run_in_threadpool(operation, *args)
        except DatabaseError as e:
            raise RecordStoreError(e.message, original_error=e.original_error)

    async def count(self, predicates: list[Predicate]) -> int:
        return await self._run(self._count, predicates)

    async def fetch(
        self, predicates: list[Predicate], offset: int, limit: int
    ) -> list[Profile]:
        return await self._run(self._fetch, predicates, offset, limit)

    async def get(self, profile_id: str) -> Profile | None:
        return await self._run(self._get, profile_id)

    async def save(self, profile: Profile) -> Profile:
        return await self._run(self._save, profile)

    async def all_profiles(self) -> list[Profile]:
        return await self._run(self._all_profiles)

    async def profile_for_owner(self, owner_id: str) -> Profile | None:
        return await self._run(self._profile_for_owner, owner_id)

    async def is_admin(self, user_id: str) -> bool:
        return await self._run(self._is_admin, user_id)

    async def add_lead(self, lead: Lead) -> Lead:
        return await self._run(self._save, lead)

    async def add_appointment(self, appointment: Appointment) -> Appointment:
        return await self._run(self._save, appointment)

    async def leads_for(self, profile_id: str) -> list[Lead]:
        return await self._run(self._children, Lead, profile_id)

    async def appointments_for(self, profile_id: str) -> list[Appointment]:
        return await self._run(self._children, Appointment, profile_id)

    def _count(self, predicates: list[Predicate]) -> int:
        with get_db_session() as session:
            statement = apply_predicates(
                select(func.count(Profile.id)), predicates, Profile
            )
            return session.exec(statement).one()

    def _fetch(self, predicates: list[Predicate], offset: int, limit: int):
        with get_db_session() as session:
            statement = apply_predicates(select(Profile), predicates, Profile)
            statement = (
                statement.order_by(Profile.rating.desc(), Profile.id)
                .offset(offset)
                .limit(limit)
            )
            return list(session.exec(statement).all())

    def _get(self, profile_id: str) -> Profile | None:
        with get_db_session() as session:
            return session.get(Profile, profile_id)

    def _save(self, record):
        if isinstance(record, Profile):
            record.updated_at = datetime.now()
        with get_db_session() as session:
            record = session.merge(record)
            session.flush()
            session.refresh(record)
            return record

    def _all_profiles(self) -> list[Profile]:
        with get_db_session() as session:
            statement = select(Profile).order_by(Profile.created_at.desc())
            return list(session.exec(statement).all())

    def _profile_for_owner(self, owner_id: str) -> Profile | None:
        with get_db_session() as session:
            return session.exec(
                select(Profile).where(Profile.owner_id == owner_id)
            ).first()

    def _is_admin(self, user_id: str) -> bool:
        with get_db_session() as session:
            return session.get(Admin, user_id) is not None

    def _children(self, model, profile_id: str):
        with get_db_session() as session:
            statement = (
                select(model)
                .where(model.profile_id == profile_id)
                .order_by(model.created_at.desc())
            )
            return list(session.exec(statement).all())


class MemoryRecordStore(RecordStore):
    def __init__(self, profiles: list[Profile] | None = None, admins=()):
        self.profiles: dict[str, Profile] = {}
        self.admins: set[str] = set(admins)
        self.leads: list[Lead] = []
        self.appointments: list[Appointment] = []
        for profile in profiles or []:
            self.profiles[profile.id] = profile

    def _matching(self, predicates: list[Predicate]) -> list[Profile]:
        return [
            profile
            for profile in self.profiles.values()
            if matches_all(profile, predicates)
        ]

    async def count(self, predicates: list[Predicate]) -> int:
        return len(self._matching(predicates))

    async def fetch(
        self, predicates: list[Predicate], offset: int, limit: int
    ) -> list[Profile]:
        ordered = sorted(self._matching(predicates), key=_rating_order)
        return ordered[offset : offset + limit]

    async def get(self, profile_id: str) -> Profile | None:
        return self.profiles.get(profile_id)

    async def save(self, profile: Profile) -> Profile:
        profile.updated_at = datetime.now()
        self.profiles[profile.id] = profile
        return profile

    async def all_profiles(self) -> list[Profile]:
        return sorted(
            self.profiles.values(), key=lambda profile: profile.created_at, reverse=True
        )

    async def profile_for_owner(self, owner_id: str) -> Profile | None:
        return next(
            (p for p in self.profiles.values() if p.owner_id == owner_id), None
        )

    async def is_admin(self, user_id: str) -> bool:
        return user_id in self.admins

    async def add_lead(self, lead: Lead) -> Lead:
        self.leads.append(lead)
        return lead

    async def add_appointment(self, appointment: Appointment) -> Appointment:
        self.appointments.append(appointment)
        return appointment

    async def leads_for(self, profile_id: str) -> list[Lead]:
        return [lead for lead in reversed(self.leads) if lead.profile_id == profile_id]

    async def appointments_for(self, profile_id: str) -> list[Appointment]:
        return [
            appointment
            for appointment in reversed(self.appointments)
            if appointment.profile_id == profile_id
        ]
