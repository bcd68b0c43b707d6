"""In-process user directory.

Nothing in the request path adds users. The host process fills it: tests call
``register`` directly, and a deployment points ``USER_DIRECTORY_FILE`` at a
JSON list of ``{"id", "name", "email", "phone"}`` records that is loaded when
the directory is first used. Users it does not know get no contact card.
"""

import json
from pathlib import Path

import structlog

from playground.directory.port import UserDirectoryPort

logger = structlog.get_logger(__name__)


class InMemoryUserDirectory(UserDirectoryPort):
    def __init__(self):
        self._users: dict[str, dict] = {}

    @classmethod
    def from_file(cls, path) -> "InMemoryUserDirectory":
        directory = cls()
        records = json.loads(Path(path).read_text(encoding="utf-8"))
        for record in records:
            directory.register(record["id"], record["name"], email=record.get("email"), phone=record.get("phone"))
        logger.info("User directory loaded", path=str(path), users=len(records))
        return directory

    def register(self, user_id: str, name: str, email: str | None = None, phone: str | None = None) -> None:
        self._users[str(user_id)] = {"id": str(user_id), "name": name, "email": email, "phone": phone}

    def contact_card(self, user_id: str) -> dict | None:
        if user_id is None:
            return None
        card = self._users.get(str(user_id))
        return dict(card) if card else None
