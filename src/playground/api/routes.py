"""FastAPI routes for equipment, orders and installations.

Writes translate the request into a command stamped with the caller's
identity and dispatch it synchronously; reads go straight to the
repositories and apply the same access rules.
"""

import json
from datetime import UTC, datetime

from fastapi import APIRouter, Depends, Query
from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from playground.access.policy import (
    Actor,
    Role,
    can_view_installation,
    require_admin,
    require_owner_or_admin,
    require_role,
)
from playground.api.dependencies import current_actor
from playground.api.schemas import (
    CancelOrderRequest,
    CustomerFeedbackRequest,
    Envelope,
    PlaceOrderRequest,
    RegisterEquipmentRequest,
    ScheduleInstallationRequest,
    UpdateEquipmentStatusRequest,
    UpdateInstallationStatusRequest,
    UpdateOrderStatusRequest,
    UpdatePaymentStatusRequest,
    UpdateTeamNotesRequest,
)
from playground.api.serializers import equipment_data, installation_data, order_data, page_data
from playground.equipment.equipment import Equipment
from playground.equipment.ledger import InventoryLedger
from playground.equipment.registration import RegisterEquipment
from playground.installation.feedback import SubmitCustomerFeedback
from playground.installation.installation import Installation
from playground.installation.notes import UpdateTeamNotes
from playground.installation.progress import UpdateEquipmentInstallStatus, UpdateInstallationStatus
from playground.installation.repository import load_installation
from playground.installation.scheduling import ScheduleInstallation
from playground.order.cancellation import CancelOrder
from playground.order.creation import PlaceOrder
from playground.order.order import Order
from playground.order.payment import UpdatePaymentStatus
from playground.order.repository import load_order
from playground.order.status import UpdateOrderStatus
from playground.shared.dispatch import dispatch
from playground.shared.errors import Forbidden

equipment_router = APIRouter(prefix="/equipment", tags=["equipment"])
order_router = APIRouter(prefix="/orders", tags=["orders"])
installation_router = APIRouter(prefix="/installations", tags=["installations"])


def _as_utc(value: datetime | None) -> datetime | None:
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def _order(order_id: str) -> Order:
    return load_order(current_domain.repository_for(Order), order_id)


def _installation(installation_id: str) -> Installation:
    return load_installation(current_domain.repository_for(Installation), installation_id)


# ---------------------------------------------------------------------------
# Equipment
# ---------------------------------------------------------------------------
@equipment_router.post("", status_code=201, response_model=Envelope)
async def register_equipment(body: RegisterEquipmentRequest, actor: Actor = Depends(current_actor)) -> Envelope:
    command = RegisterEquipment(actor_id=actor.user_id, actor_role=actor.role, **body.model_dump())
    equipment_id = dispatch(command)
    equipment = InventoryLedger().load(equipment_id)
    return Envelope(message="Equipment registered", data=equipment_data(equipment))


@equipment_router.get("/{equipment_id}", response_model=Envelope)
async def get_equipment(equipment_id: str, _actor: Actor = Depends(current_actor)) -> Envelope:
    return Envelope(data=equipment_data(InventoryLedger().load(equipment_id)))


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
@order_router.post("", status_code=201, response_model=Envelope)
async def place_order(body: PlaceOrderRequest, actor: Actor = Depends(current_actor)) -> Envelope:
    command = PlaceOrder(
        actor_id=actor.user_id,
        actor_role=actor.role,
        items=json.dumps([item.model_dump() for item in body.items]),
        shipping_address=json.dumps(body.shipping_address.model_dump()),
        payment_method=body.payment_method,
        notes=body.notes,
        installation_site=json.dumps(body.installation_site.model_dump()) if body.installation_site else None,
    )
    order_id = dispatch(command)
    return Envelope(message="Order placed", data=order_data(_order(order_id)))


@order_router.get("", response_model=Envelope)
async def list_orders(
    status: str | None = None,
    payment_status: str | None = None,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    actor: Actor = Depends(current_actor),
) -> Envelope:
    """Administrators see every order; everyone else sees their own."""
    repo = current_domain.repository_for(Order)
    result = repo.page(
        page=page,
        limit=limit,
        customer_id=None if actor.is_admin else actor.user_id,
        status=status,
        payment_status=payment_status,
    )
    return Envelope(data=page_data(result, order_data))


@order_router.get("/my-orders", response_model=Envelope)
async def my_orders(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    actor: Actor = Depends(current_actor),
) -> Envelope:
    result = current_domain.repository_for(Order).page(page=page, limit=limit, customer_id=actor.user_id)
    return Envelope(data=page_data(result, order_data))


@order_router.get("/stats/overview", response_model=Envelope)
async def order_stats(actor: Actor = Depends(current_actor)) -> Envelope:
    require_admin(actor)
    return Envelope(data=current_domain.repository_for(Order).overview())


@order_router.get("/{order_id}", response_model=Envelope)
async def get_order(order_id: str, actor: Actor = Depends(current_actor)) -> Envelope:
    order = _order(order_id)
    require_owner_or_admin(actor, order.customer_id, resource="order")
    return Envelope(data=order_data(order, with_contacts=True))


@order_router.put("/{order_id}/status", response_model=Envelope)
async def update_order_status(
    order_id: str, body: UpdateOrderStatusRequest, actor: Actor = Depends(current_actor)
) -> Envelope:
    dispatch(
        UpdateOrderStatus(
            actor_id=actor.user_id,
            actor_role=actor.role,
            order_id=order_id,
            status=body.status,
            note=body.note,
        )
    )
    return Envelope(message="Order status updated", data=order_data(_order(order_id)))


@order_router.put("/{order_id}/payment", response_model=Envelope)
async def update_payment_status(
    order_id: str, body: UpdatePaymentStatusRequest, actor: Actor = Depends(current_actor)
) -> Envelope:
    dispatch(
        UpdatePaymentStatus(
            actor_id=actor.user_id,
            actor_role=actor.role,
            order_id=order_id,
            payment_status=body.payment_status,
        )
    )
    return Envelope(message="Payment status updated", data=order_data(_order(order_id)))


@order_router.put("/{order_id}/cancel", response_model=Envelope)
async def cancel_order(
    order_id: str, body: CancelOrderRequest | None = None, actor: Actor = Depends(current_actor)
) -> Envelope:
    dispatch(
        CancelOrder(
            actor_id=actor.user_id,
            actor_role=actor.role,
            order_id=order_id,
            reason=body.reason if body else None,
        )
    )
    return Envelope(message="Order cancelled", data=order_data(_order(order_id)))


# ---------------------------------------------------------------------------
# Installations
# ---------------------------------------------------------------------------
@installation_router.post("", status_code=201, response_model=Envelope)
async def schedule_installation(body: ScheduleInstallationRequest, actor: Actor = Depends(current_actor)) -> Envelope:
    command = ScheduleInstallation(
        actor_id=actor.user_id,
        actor_role=actor.role,
        order_id=body.order_id,
        team_id=body.team_id,
        scheduled_date=_as_utc(body.scheduled_date),
        scheduled_time=json.dumps(body.scheduled_time.model_dump()) if body.scheduled_time else None,
        location=json.dumps(body.location.model_dump()) if body.location else None,
        estimated_duration=body.estimated_duration,
        notes=body.notes,
    )
    installation_id = dispatch(command)
    return Envelope(message="Installation scheduled", data=installation_data(_installation(installation_id)))


@installation_router.get("", response_model=Envelope)
async def list_installations(
    status: str | None = None,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    actor: Actor = Depends(current_actor),
) -> Envelope:
    """Administrators see everything, teams their assignments, customers their own."""
    repo = current_domain.repository_for(Installation)
    result = repo.page(
        page=page,
        limit=limit,
        team_id=actor.user_id if actor.is_team else None,
        customer_id=actor.user_id if actor.is_customer else None,
        status=status,
    )
    return Envelope(data=page_data(result, installation_data))


@installation_router.get("/team/schedule", response_model=Envelope)
async def team_schedule(
    start_date: datetime | None = None,
    end_date: datetime | None = None,
    team_id: str | None = None,
    actor: Actor = Depends(current_actor),
) -> Envelope:
    require_role(actor, Role.ADMIN, Role.INSTALLATION_TEAM)
    if actor.is_team:
        team_id = actor.user_id
    elif not team_id:
        raise ValidationError({"team_id": ["team_id is required"]})

    installations = current_domain.repository_for(Installation).team_schedule(
        team_id, start=_as_utc(start_date), end=_as_utc(end_date)
    )
    return Envelope(data=[installation_data(installation) for installation in installations])


@installation_router.get("/stats/overview", response_model=Envelope)
async def installation_stats(actor: Actor = Depends(current_actor)) -> Envelope:
    require_admin(actor)
    return Envelope(data=current_domain.repository_for(Installation).overview())


@installation_router.get("/{installation_id}", response_model=Envelope)
async def get_installation(installation_id: str, actor: Actor = Depends(current_actor)) -> Envelope:
    installation = _installation(installation_id)
    if not can_view_installation(actor, installation):
        raise Forbidden({"installation": ["Not authorized to view this installation"]})
    return Envelope(data=installation_data(installation, with_contacts=True))


@installation_router.put("/{installation_id}/status", response_model=Envelope)
async def update_installation_status(
    installation_id: str, body: UpdateInstallationStatusRequest, actor: Actor = Depends(current_actor)
) -> Envelope:
    dispatch(
        UpdateInstallationStatus(
            actor_id=actor.user_id,
            actor_role=actor.role,
            installation_id=installation_id,
            status=body.status,
            note=body.note,
        )
    )
    return Envelope(message="Installation status updated", data=installation_data(_installation(installation_id)))


@installation_router.put("/{installation_id}/equipment-status", response_model=Envelope)
async def update_equipment_status(
    installation_id: str, body: UpdateEquipmentStatusRequest, actor: Actor = Depends(current_actor)
) -> Envelope:
    dispatch(
        UpdateEquipmentInstallStatus(
            actor_id=actor.user_id,
            actor_role=actor.role,
            installation_id=installation_id,
            equipment_id=body.equipment_id,
            status=body.status,
        )
    )
    return Envelope(message="Equipment status updated", data=installation_data(_installation(installation_id)))


@installation_router.put("/{installation_id}/notes", response_model=Envelope)
async def update_team_notes(
    installation_id: str, body: UpdateTeamNotesRequest, actor: Actor = Depends(current_actor)
) -> Envelope:
    dispatch(
        UpdateTeamNotes(
            actor_id=actor.user_id,
            actor_role=actor.role,
            installation_id=installation_id,
            team_notes=body.team_notes,
        )
    )
    return Envelope(message="Team notes updated", data=installation_data(_installation(installation_id)))


@installation_router.put("/{installation_id}/feedback", response_model=Envelope)
async def submit_feedback(
    installation_id: str, body: CustomerFeedbackRequest, actor: Actor = Depends(current_actor)
) -> Envelope:
    dispatch(
        SubmitCustomerFeedback(
            actor_id=actor.user_id,
            actor_role=actor.role,
            installation_id=installation_id,
            rating=body.rating,
            comment=body.comment,
        )
    )
    return Envelope(message="Feedback submitted", data=installation_data(_installation(installation_id)))
