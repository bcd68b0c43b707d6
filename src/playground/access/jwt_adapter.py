"""JWT identity resolver backed by PyJWT.

Tokens are expected to carry the user id in ``sub`` and one of the
``Role`` values in ``role``.
"""

import os

import jwt
import structlog

from playground.access.policy import Actor, Role
from playground.access.port import IdentityResolverPort

logger = structlog.get_logger(__name__)


class JwtIdentityResolver(IdentityResolverPort):
    def __init__(self, secret: str, algorithm: str = "HS256"):
        self.secret = secret
        self.algorithm = algorithm

    @classmethod
    def from_environment(cls) -> "JwtIdentityResolver":
        secret = os.environ.get("JWT_SECRET")
        if not secret:
            raise ValueError("JWT_SECRET must be set when IDENTITY_RESOLVER=jwt")
        return cls(secret, os.environ.get("JWT_ALGORITHM", "HS256"))

    def resolve(self, credential: str) -> Actor | None:
        try:
            claims = jwt.decode(credential, self.secret, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError:
            logger.info("Rejected expired token")
            return None
        except jwt.InvalidTokenError:
            logger.info("Rejected invalid token")
            return None

        user_id = claims.get("sub")
        role = claims.get("role")
        if not user_id or role not in {r.value for r in Role}:
            logger.info("Rejected token with missing claims", has_sub=bool(user_id), role=role)
            return None
        return Actor(user_id=str(user_id), role=role)
