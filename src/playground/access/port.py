"""Identity resolver port.

The lifecycle code never validates credentials itself; it receives an
already-resolved ``Actor`` from whichever adapter is configured.
"""

from abc import ABC, abstractmethod

from playground.access.policy import Actor


class IdentityResolverPort(ABC):
    @abstractmethod
    def resolve(self, credential: str) -> Actor | None:
        """Return the actor behind ``credential``, or None if it is not valid."""
        ...
