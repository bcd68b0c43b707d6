"""Identity resolution: turns a bearer credential into an ``Actor``."""

import os

_resolver_instance = None


def get_identity_resolver():
    """Return the configured identity resolver (singleton).

    Uses FakeIdentityResolver by default. Set IDENTITY_RESOLVER=jwt to
    verify signed tokens instead.
    """
    global _resolver_instance
    if _resolver_instance is None:
        adapter = os.environ.get("IDENTITY_RESOLVER", "fake")
        if adapter == "fake":
            from playground.access.fake_adapter import FakeIdentityResolver

            _resolver_instance = FakeIdentityResolver()
        elif adapter == "jwt":
            from playground.access.jwt_adapter import JwtIdentityResolver

            _resolver_instance = JwtIdentityResolver.from_environment()
        else:
            raise ValueError(f"Unknown identity resolver: {adapter}")
    return _resolver_instance


def reset_identity_resolver():
    """Reset the resolver singleton (useful for testing)."""
    global _resolver_instance
    _resolver_instance = None
