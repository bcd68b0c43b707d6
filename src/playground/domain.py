"""Domain initialization and configuration."""

from protean.domain import Domain

from playground.utils.logging import configure_logging, get_logger

# Configure logging for the application
configure_logging()

# Get logger for this module
logger = get_logger(__name__)

# Domain Composition Root
#   Equipment, Order and Installation live in one domain so that an order and
#   the stock it reserves are committed in the same unit of work.
playground = Domain(name="playground")
