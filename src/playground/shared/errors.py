"""Error taxonomy for the order and installation lifecycle.

Every error carries ``messages``, a ``{field: [text, ...]}`` mapping, the
same shape Protean uses for ``ValidationError``. The API layer maps each
class to an HTTP status.
"""

from protean.exceptions import ObjectNotFoundError, ValidationError


class PlaygroundError(Exception):
    """Base for errors that are not validation failures."""

    def __init__(self, messages):
        self.messages = messages
        super().__init__(messages)

    def __str__(self):
        return f"{dict(self.messages)}"


class NotFound(ObjectNotFoundError):
    """A referenced Order, Installation, Equipment or equipment entry is absent."""


class Forbidden(PlaygroundError):
    """The caller's role or ownership does not permit the operation."""


class Unauthenticated(PlaygroundError):
    """No identity could be resolved from the request credentials."""


class InvalidTransition(ValidationError):
    """The requested status change is not allowed from the current status."""


class InvalidState(ValidationError):
    """The aggregate is not in a state that accepts the operation."""


class InsufficientStock(ValidationError):
    """Equipment is unavailable or has fewer units than requested."""


class EmptyOrder(ValidationError):
    """An order was placed without any line items."""


def first_message(exc: Exception) -> str:
    """Flatten an error's messages into one human-readable sentence."""
    messages = getattr(exc, "messages", None)
    if isinstance(messages, dict):
        texts = []
        for value in messages.values():
            if isinstance(value, (list, tuple)):
                texts.extend(str(v) for v in value)
            else:
                texts.append(str(value))
        if texts:
            return "; ".join(texts)
    elif messages:
        return str(messages)
    return exc.__class__.__name__
