import enum
import uuid
from datetime import date, datetime
from typing import List, Optional

from sqlalchemy import String
from sqlalchemy.dialects.postgresql import ARRAY
from sqlmodel import Column, Enum, Field, SQLModel


def _new_id() -> str:
    return str(uuid.uuid4())


class ServiceType(str, enum.Enum):
    APPOINTMENT = "appointment"
    PROJECT = "project"
    EMERGENCY = "emergency"
    RETAIL = "retail"


class Gender(str, enum.Enum):
    MALE = "male"
    FEMALE = "female"


class Role(str, enum.Enum):
    PROFESSIONAL = "professional"
    STORE = "store"


class LeadStatus(str, enum.Enum):
    NEW = "new"
    CONTACTED = "contacted"
    CLOSED = "closed"


class AppointmentStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class Profile(SQLModel, table=True):
    __tablename__ = "profiles"

    id: str = Field(default_factory=_new_id, primary_key=True)
    owner_id: Optional[str] = Field(default=None, index=True)
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)
    email: str = ""
    business_name: str
    gender: Optional[Gender] = Field(
        default=None, sa_column=Column(Enum(Gender), nullable=True)
    )
    role: Role = Field(
        default=Role.PROFESSIONAL,
        sa_column=Column(Enum(Role), nullable=False),
    )
    service_type: ServiceType = Field(
        default=ServiceType.APPOINTMENT,
        sa_column=Column(Enum(ServiceType), nullable=False, index=True),
    )
    city: str = Field(default="", index=True)
    address: Optional[str] = None
    phone: str = ""
    whatsapp: Optional[str] = None
    description: Optional[str] = None
    rating: float = Field(default=0.0)
    review_count: int = Field(default=0)
    media_urls: List[str] = Field(
        default_factory=list, sa_column=Column(ARRAY(String), nullable=False)
    )
    avatar_url: Optional[str] = None
    is_verified: bool = Field(default=False)
    is_active: bool = Field(default=True)
    categories: List[str] = Field(
        default_factory=list, sa_column=Column(ARRAY(String), nullable=False)
    )
    community: Optional[str] = None
    website_url: Optional[str] = None
    country: str = Field(default="IL", index=True)


class Admin(SQLModel, table=True):
    __tablename__ = "admins"

    user_id: str = Field(primary_key=True)


class Lead(SQLModel, table=True):
    __tablename__ = "leads"

    id: str = Field(default_factory=_new_id, primary_key=True)
    created_at: datetime = Field(default_factory=datetime.now)
    profile_id: str = Field(foreign_key="profiles.id", index=True)
    customer_name: str
    customer_phone: str
    customer_email: Optional[str] = None
    message: Optional[str] = None
    status: LeadStatus = Field(
        default=LeadStatus.NEW,
        sa_column=Column(Enum(LeadStatus), nullable=False),
    )


class Appointment(SQLModel, table=True):
    __tablename__ = "appointments"

    id: str = Field(default_factory=_new_id, primary_key=True)
    created_at: datetime = Field(default_factory=datetime.now)
    profile_id: str = Field(foreign_key="profiles.id", index=True)
    customer_name: str
    customer_phone: str
    requested_date: date
    requested_time: Optional[str] = None
    status: AppointmentStatus = Field(
        default=AppointmentStatus.PENDING,
        sa_column=Column(Enum(AppointmentStatus), nullable=False),
    )
    notes: Optional[str] = None
