from abc import ABC, abstractmethod


class UserDirectoryPort(ABC):
    @abstractmethod
    def contact_card(self, user_id: str) -> dict | None:
        """Return ``{"id", "name", "email", "phone"}`` for a user, or None if unknown."""
        ...
