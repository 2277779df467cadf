"""Pydantic models shared by the paginated core and the providers."""

from reserved_dal.models.contexts import PageContext
from reserved_dal.models.datatypes import Page, RecurringCharge, ReservedInstance
from reserved_dal.models.params import MAX_PAGE_SIZE, MIN_PAGE_SIZE, PageRequest

__all__ = [
    # Contexts (runtime state)
    "PageContext",
    # Params (request shape)
    "MAX_PAGE_SIZE",
    "MIN_PAGE_SIZE",
    "PageRequest",
    # Data types
    "Page",
    "RecurringCharge",
    "ReservedInstance",
]
