"""Pydantic API schemas for the playground lifecycle.

These are the external API contracts, separate from domain commands.
The routes translate between these schemas and commands.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Envelope
# ---------------------------------------------------------------------------
class Envelope(BaseModel):
    success: bool = True
    message: str | None = None
    data: Any = None


# ---------------------------------------------------------------------------
# Equipment
# ---------------------------------------------------------------------------
class RegisterEquipmentRequest(BaseModel):
    name: str
    category: str
    price: float = Field(ge=0)
    stock: int = Field(default=0, ge=0)
    description: str | None = None
    installation_required: bool = True
    installation_time_days: int = Field(default=1, ge=0)
    image: str | None = None


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
class OrderLineRequest(BaseModel):
    equipment_id: str
    quantity: int = Field(ge=1)


class ShippingAddressRequest(BaseModel):
    name: str
    phone: str
    street: str
    city: str
    state: str
    zip_code: str
    country: str = "India"


class InstallationSiteRequest(BaseModel):
    address: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    layout_image: str | None = None
    layout_notes: str | None = None


class PlaceOrderRequest(BaseModel):
    items: list[OrderLineRequest]
    shipping_address: ShippingAddressRequest
    payment_method: str = "cod"
    notes: str | None = None
    installation_site: InstallationSiteRequest | None = None


class UpdateOrderStatusRequest(BaseModel):
    status: str
    note: str | None = None


class UpdatePaymentStatusRequest(BaseModel):
    payment_status: str


class CancelOrderRequest(BaseModel):
    reason: str | None = None


# ---------------------------------------------------------------------------
# Installations
# ---------------------------------------------------------------------------
class TimeWindowRequest(BaseModel):
    start: str | None = None
    end: str | None = None


class SiteLocationRequest(BaseModel):
    street: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    country: str = "India"
    latitude: float | None = None
    longitude: float | None = None
    landmark: str | None = None
    access_instructions: str | None = None


class ScheduleInstallationRequest(BaseModel):
    order_id: str
    team_id: str
    scheduled_date: datetime
    scheduled_time: TimeWindowRequest | None = None
    location: SiteLocationRequest | None = None
    estimated_duration: float | None = Field(default=None, ge=0)
    notes: str | None = None


class UpdateInstallationStatusRequest(BaseModel):
    status: str
    note: str | None = None


class UpdateEquipmentStatusRequest(BaseModel):
    equipment_id: str
    status: str


class UpdateTeamNotesRequest(BaseModel):
    team_notes: str | None = None


class CustomerFeedbackRequest(BaseModel):
    rating: int
    comment: str | None = None
