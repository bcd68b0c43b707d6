"""Request-scoped dependencies: resolving the calling actor."""

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from playground.access import get_identity_resolver
from playground.access.policy import Actor
from playground.shared.errors import Unauthenticated
from playground.utils.logging import add_context

http_bearer = HTTPBearer(auto_error=False)


async def current_actor(credentials: HTTPAuthorizationCredentials | None = Depends(http_bearer)) -> Actor:
    if credentials is None:
        raise Unauthenticated({"authorization": ["Not authorized to access this route"]})

    actor = get_identity_resolver().resolve(credentials.credentials)
    if actor is None:
        raise Unauthenticated({"authorization": ["Invalid or expired credentials"]})

    add_context(user_id=actor.user_id, role=actor.role)
    return actor
