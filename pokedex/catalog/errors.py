"""
Exceptions raised by the Pokédex catalogue client.

Hierarchy::

    CatalogError (base)
    ├── NotFoundError   - no matching id, name, species or default variety
    └── TransientError  - network or service failure, including responses
                          that do not have the expected shape

The client raises these; the controller catches them at each trigger and
turns them into display flags, and the router maps direct lookups to HTTP
status codes.
"""


class CatalogError(Exception):
    """Base exception for catalogue lookups."""

    def __init__(self, message: str = "Catalogue lookup failed"):
        self.message = message
        super().__init__(self.message)


class NotFoundError(CatalogError):
    """Raised when the remote catalogue has no matching resource.

    Attributes:
        key: The id, name or URL that could not be resolved
    """

    def __init__(self, key, message: str = None):
        self.key = key
        super().__init__(message or f"No catalogue entry for {key!r}")

    def __repr__(self) -> str:
        return f"NotFoundError(key={self.key!r}, message={self.message!r})"


class TransientError(CatalogError):
    """Raised when the remote catalogue cannot be reached or answers badly.

    Attributes:
        url: The URL being fetched, when known
    """

    def __init__(self, message: str, url: str = None):
        self.url = url
        super().__init__(message)
