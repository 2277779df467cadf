"""Context types for paginated operations.

Contexts carry state needed to resume reading from a specific position.
They only track *where* to resume, not *how much* to read (that's in Params).
"""

from pydantic import BaseModel


class PageContext(BaseModel, frozen=True):
    """Continuation state handed to and returned by a page fetcher.

    Token-based pagination: the token is opaque and only the fetcher that
    produced it knows how to interpret it.
    """

    token: str | None = None
    """Continuation token for the next page (None requests the first page)."""
