"""Equipment registration: command and handler."""

from protean import handle
from protean.fields import Boolean, Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from playground.access.policy import Actor, require_admin
from playground.domain import playground
from playground.equipment.equipment import Equipment


@playground.command(part_of="Equipment")
class RegisterEquipment:
    """Add a piece of equipment to the catalog."""

    actor_id = Identifier(required=True)
    actor_role = String(required=True, max_length=30)
    name = String(required=True, max_length=100)
    category = String(required=True, max_length=50)
    price = Float(required=True, min_value=0.0)
    stock = Integer(default=0, min_value=0)
    description = Text()
    installation_required = Boolean(default=True)
    installation_time_days = Integer(default=1, min_value=0)
    image = String(max_length=500)


@playground.command_handler(part_of=Equipment)
class RegisterEquipmentHandler:
    @handle(RegisterEquipment)
    def register_equipment(self, command):
        require_admin(Actor.of(command.actor_id, command.actor_role))
        equipment = Equipment.register(
            name=command.name,
            category=command.category,
            price=command.price,
            stock=command.stock or 0,
            description=command.description,
            installation_required=command.installation_required,
            installation_time_days=command.installation_time_days,
            image=command.image,
        )
        current_domain.repository_for(Equipment).add(equipment)
        return str(equipment.id)
