"""
Exception hierarchy for tribler-arr-shim.

Engine Client and Association Store raise these; the API layer turns them
into HTTP responses (see utils/errors.py).
"""
from typing import Optional


class ShimError(Exception):
    """Base class for all errors raised by the translation layer."""


class ConfigurationError(ShimError):
    """Tribler endpoint or API key missing. Not retried."""


class TransportError(ShimError):
    """Tribler could not be reached (connection refused, DNS, timeout)."""


class RemoteEngineError(ShimError):
    """Tribler answered with a non-2xx status."""

    def __init__(self, status: int, status_line: str, body: Optional[str] = None):
        self.status = status
        self.status_line = status_line
        self.body = body
        super().__init__(status_line)


class DecodeError(ShimError):
    """Tribler answered 2xx but the payload was not what we expect."""


class NotFound(ShimError):
    """The infohash is unknown to Tribler or to the local store."""

    def __init__(self, infohash: str):
        self.infohash = infohash
        super().__init__(f"Torrent {infohash} not found")


class CategoryNotFound(ShimError):
    """An association referenced a category name that does not exist."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Category {name!r} does not exist")


class DuplicateCategory(ShimError):
    """
    Category name already taken.

    Never escapes AssociationStore.add_category: the conflict is the
    idempotent success path there.
    """

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Category {name!r} already exists")
