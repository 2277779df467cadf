"""Data types for the DAL.

These types represent the data items that flow through the paginated core:
- `Page` for one batch of records plus continuation state
- `ReservedInstance` for one OpenSearch reserved capacity record
- `RecurringCharge` for the recurring fees attached to a reservation
"""

from datetime import datetime
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_pascal

from reserved_dal.models.contexts import PageContext

T = TypeVar("T")


class Page(BaseModel, Generic[T], frozen=True):
    """One page of records returned by a single remote round trip."""

    records: list[T] = Field(default_factory=list)
    """Records in the order the remote service returned them."""

    has_more: bool = False
    """Whether another page can be requested. False is terminal."""

    context: PageContext = Field(default_factory=PageContext)
    """Continuation state for the next page."""


class _AwsShape(BaseModel):
    """Base for models parsed from AWS responses (PascalCase keys)."""

    model_config = ConfigDict(
        alias_generator=to_pascal,
        populate_by_name=True,
        frozen=True,
    )


class RecurringCharge(_AwsShape):
    """A recurring fee billed for a reservation."""

    recurring_charge_amount: float | None = None
    recurring_charge_frequency: str | None = None


class ReservedInstance(_AwsShape):
    """An OpenSearch reserved instance.

    Field names follow the table columns; values are parsed from the
    `DescribeReservedInstances` response item.
    """

    reserved_instance_id: str
    """The unique identifier for the reservation."""

    reservation_name: str | None = None
    """The customer-specified identifier to track this reservation."""

    billing_subscription_id: int | None = None
    reserved_instance_offering_id: str | None = None
    instance_type: str | None = None
    start_time: datetime | None = None
    """When the reservation was purchased."""

    duration: int | None = None
    """Reserved duration in seconds."""

    fixed_price: float | None = None
    usage_price: float | None = None
    currency_code: str | None = None
    instance_count: int | None = None
    state: str | None = None
    payment_option: str | None = None
    recurring_charges: list[RecurringCharge] = Field(default_factory=list)

    region: str | None = None
    """Region the reservation was listed from."""

    account_id: str | None = None
    """Account owning the reservation, when the provider resolved it."""

    @property
    def title(self) -> str:
        """Display title of the record."""
        return self.reserved_instance_id

    @property
    def akas(self) -> list[str]:
        """Also-known-as identifiers of the record."""
        return [self.reserved_instance_id]
