"""In-memory identity resolver for development and tests."""

from uuid import uuid4

from playground.access.policy import Actor
from playground.access.port import IdentityResolverPort


class FakeIdentityResolver(IdentityResolverPort):
    """Hands out opaque tokens and remembers who they belong to."""

    def __init__(self):
        self._tokens: dict[str, Actor] = {}

    def issue(self, user_id: str, role: str) -> str:
        token = f"fake-{uuid4().hex}"
        self._tokens[token] = Actor.of(user_id, role)
        return token

    def revoke(self, token: str) -> None:
        self._tokens.pop(token, None)

    def resolve(self, credential: str) -> Actor | None:
        return self._tokens.get(credential)
