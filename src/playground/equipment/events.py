"""Domain events for the Equipment aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from playground.domain import playground


@playground.event(part_of="Equipment")
class EquipmentRegistered:
    """A new piece of equipment was added to the catalog."""

    __version__ = 1

    equipment_id = Identifier(required=True)
    name = String(required=True)
    category = String(required=True)
    price = Float(required=True)
    stock = Integer(required=True)
    registered_at = DateTime(required=True)


@playground.event(part_of="Equipment")
class StockReserved:
    """Units were taken out of stock for an order."""

    __version__ = 1

    equipment_id = Identifier(required=True)
    quantity = Integer(required=True)
    previous_stock = Integer(required=True)
    new_stock = Integer(required=True)
    reserved_at = DateTime(required=True)


@playground.event(part_of="Equipment")
class StockRestored:
    """Units were put back into stock, typically after an order was cancelled."""

    __version__ = 1

    equipment_id = Identifier(required=True)
    quantity = Integer(required=True)
    previous_stock = Integer(required=True)
    new_stock = Integer(required=True)
    restored_at = DateTime(required=True)


@playground.event(part_of="Equipment")
class EquipmentSoldOut:
    """The last unit was reserved; the equipment is no longer available."""

    __version__ = 1

    equipment_id = Identifier(required=True)
    sold_out_at = DateTime(required=True)
