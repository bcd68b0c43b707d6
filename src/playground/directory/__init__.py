"""User directory: read-only lookup of names and contact details."""

import os

_directory_instance = None


def get_user_directory():
    """Return the configured user directory (singleton)."""
    global _directory_instance
    if _directory_instance is None:
        adapter = os.environ.get("USER_DIRECTORY", "memory")
        if adapter == "memory":
            from playground.directory.memory_adapter import InMemoryUserDirectory

            source = os.environ.get("USER_DIRECTORY_FILE")
            _directory_instance = InMemoryUserDirectory.from_file(source) if source else InMemoryUserDirectory()
        else:
            raise ValueError(f"Unknown user directory: {adapter}")
    return _directory_instance


def reset_user_directory():
    """Reset the directory singleton (useful for testing)."""
    global _directory_instance
    _directory_instance = None
