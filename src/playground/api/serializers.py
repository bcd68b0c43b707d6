"""Aggregate → JSON-ready dict conversion for API responses."""

from playground.directory import get_user_directory


def _value(vo) -> dict | None:
    return vo.to_dict() if vo is not None else None


def _history(entries) -> list[dict]:
    return [
        {
            "status": entry.status,
            "note": entry.note,
            "recorded_at": entry.recorded_at,
            "sequence": entry.sequence,
            "updated_by": entry.updated_by,
        }
        for entry in sorted(entries or [], key=lambda e: e.sequence or 0)
    ]


def equipment_data(equipment) -> dict:
    return {
        "id": str(equipment.id),
        "name": equipment.name,
        "description": equipment.description,
        "category": equipment.category,
        "price": equipment.price,
        "stock": equipment.stock,
        "is_available": equipment.is_available,
        "installation_required": equipment.installation_required,
        "installation_time_days": equipment.installation_time_days,
        "image": equipment.image,
        "created_at": equipment.created_at,
        "updated_at": equipment.updated_at,
    }


def order_data(order, with_contacts: bool = False) -> dict:
    data = {
        "id": str(order.id),
        "order_number": order.order_number,
        "customer_id": str(order.customer_id),
        "items": [
            {
                "equipment_id": str(item.equipment_id),
                "name": item.name,
                "price": item.price,
                "image": item.image,
                "quantity": item.quantity,
            }
            for item in order.items or []
        ],
        "pricing": _value(order.pricing),
        "shipping_address": _value(order.shipping_address),
        "installation_site": _value(order.installation_site),
        "status": order.status,
        "payment_status": order.payment_status,
        "payment_method": order.payment_method,
        "notes": order.notes,
        "status_history": _history(order.status_history),
        "created_at": order.created_at,
        "updated_at": order.updated_at,
    }
    if with_contacts:
        data["customer"] = get_user_directory().contact_card(str(order.customer_id))
    return data


def installation_data(installation, with_contacts: bool = False) -> dict:
    data = {
        "id": str(installation.id),
        "order_id": str(installation.order_id),
        "order_number": installation.order_number,
        "customer_id": str(installation.customer_id),
        "team_id": str(installation.team_id),
        "scheduled_date": installation.scheduled_date,
        "scheduled_time": _value(installation.scheduled_time),
        "status": installation.status,
        "location": _value(installation.location),
        "equipment_list": [
            {
                "equipment_id": str(entry.equipment_id),
                "name": entry.name,
                "quantity": entry.quantity,
                "installation_status": entry.installation_status,
            }
            for entry in installation.equipment_list or []
        ],
        "notes": installation.notes,
        "team_notes": installation.team_notes,
        "customer_feedback": _value(installation.customer_feedback),
        "estimated_duration": installation.estimated_duration,
        "actual_duration": installation.actual_duration,
        "start_time": installation.start_time,
        "completed_date": installation.completed_date,
        "status_history": _history(installation.status_history),
        "created_at": installation.created_at,
        "updated_at": installation.updated_at,
    }
    if with_contacts:
        directory = get_user_directory()
        data["customer"] = directory.contact_card(str(installation.customer_id))
        data["team"] = directory.contact_card(str(installation.team_id))
    return data


def page_data(page: dict, serialize) -> dict:
    return {**page, "items": [serialize(item) for item in page["items"]]}
