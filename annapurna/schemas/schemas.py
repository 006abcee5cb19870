# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# SPDX-License-Identifier: MIT
#

from datetime import datetime
from typing import Annotated, List, Literal, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, EmailStr, Field

UserRole = Literal["donor", "ngo", "volunteer", "admin"]
SelfServiceRole = Literal["donor", "ngo", "volunteer"]
DonationStatus = Literal["submitted", "claimed", "picked_up", "delivered", "cancelled"]
ClaimStatus = Literal["claimed", "picked_up", "delivered"]


class Token(BaseModel):
    access_token: str
    token_type: str


class TokenData(BaseModel):
    user_id: Optional[str] = None
    session_id: Optional[str] = None
    role: Optional[str] = None
    role_set_at: Optional[datetime] = None


# --- Users ---

class UserBase(BaseModel):
    email: EmailStr
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    organization_name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    profile_image_url: Optional[str] = None


class UserCreate(UserBase):
    password: str
    role: Optional[SelfServiceRole] = None


class User(UserBase):
    id: str
    role: Optional[str] = None
    verified: bool
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class RoleUpdate(BaseModel):
    role: SelfServiceRole


class RoleSwitchResponse(BaseModel):
    user: User
    access_token: str
    token_type: str = "bearer"


class LocationUpdate(BaseModel):
    latitude: float
    longitude: float


class VerificationUpdate(BaseModel):
    verified: bool


# --- Donations ---

class DonationBase(BaseModel):
    food_type: str
    quantity: int
    unit: str = "servings"
    expiry_hours: int
    location: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    image_url: Optional[str] = None
    description: Optional[str] = None
    dietary_info: Optional[List[str]] = None
    pickup_instructions: Optional[str] = None
    contact_phone: Optional[str] = None


class DonationCreate(DonationBase):
    pass


class Donation(DonationBase):
    id: str
    donor_id: str
    status: DonationStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


# --- Claims ---

class ClaimCreate(BaseModel):
    donation_id: str = Field(validation_alias=AliasChoices("donation_id", "donationId"))
    notes: Optional[str] = None


class ClaimStatusUpdate(BaseModel):
    status: Literal["picked_up", "delivered"]


class Claim(BaseModel):
    id: str
    donation_id: str
    ngo_id: Optional[str] = None
    volunteer_id: Optional[str] = None
    status: ClaimStatus
    claimed_at: Optional[datetime] = None
    picked_up_at: Optional[datetime] = None
    delivered_at: Optional[datetime] = None
    notes: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


# --- Impact ---

class Impact(BaseModel):
    user_id: str
    meals_donated: int
    meals_distributed: int
    deliveries_completed: int
    points: int
    carbon_footprint_reduced: float
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class PlatformStats(BaseModel):
    total_users: int
    total_donations: int
    total_meals: int
    pending_verifications: int
    active_donations: int
    total_impact_points: int


# --- Notifications ---

class Notification(BaseModel):
    id: str
    user_id: str
    title: str
    description: Optional[str] = None
    type: str
    read: bool
    related_entity_id: Optional[str] = None
    related_entity_type: Optional[str] = None
    action_url: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


# --- Dashboards ---

class DonorDashboard(BaseModel):
    view: Literal["donor"] = "donor"
    donations: List[Donation]
    impact: Impact


class NGODashboard(BaseModel):
    view: Literal["ngo"] = "ngo"
    available_donations: List[Donation]
    claims: List[Claim]
    impact: Impact


class VolunteerDashboard(BaseModel):
    view: Literal["volunteer"] = "volunteer"
    available_pickups: List[Donation]
    claims: List[Claim]
    impact: Impact


class AdminDashboard(BaseModel):
    view: Literal["admin"] = "admin"
    stats: PlatformStats
    pending_users: List[User]


class RoleSelection(BaseModel):
    view: Literal["role_selection"] = "role_selection"
    available_roles: List[str]
    message: str


Dashboard = Annotated[
    Union[DonorDashboard, NGODashboard, VolunteerDashboard, AdminDashboard, RoleSelection],
    Field(discriminator="view"),
]


class DashboardResponse(BaseModel):
    role: Optional[str] = None
    role_source: Optional[str] = None
    dashboard: Dashboard
