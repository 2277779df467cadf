"""OpenSearch reserved instance provider using boto3."""

import asyncio
import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any, ClassVar, Self

from pydantic import BaseModel, Field, ValidationError

from reserved_dal.enumeration import EnumerationDriver, EnumerationResult
from reserved_dal.errors import DalError, ErrorKind
from reserved_dal.lookup import LookupResolver
from reserved_dal.models.contexts import PageContext
from reserved_dal.models.datatypes import Page, ReservedInstance
from reserved_dal.models.params import MAX_PAGE_SIZE, MIN_PAGE_SIZE, PageRequest
from reserved_dal.protocols import RecordSink

if TYPE_CHECKING:
    from mypy_boto3_opensearch import OpenSearchServiceClient

try:
    import boto3
    from botocore.exceptions import BotoCoreError, ClientError, ConnectTimeoutError, ReadTimeoutError
except ImportError as e:
    _msg = "boto3 is required for OpenSearch support. Install with: uv add 'reserved-dal[aws]'"
    raise ImportError(_msg) from e

logger = logging.getLogger(__name__)

SERVICE_NAME = "opensearch"

_CREDENTIAL_ERROR_CODES = frozenset(
    {
        "AccessDeniedException",
        "ExpiredTokenException",
        "InvalidClientTokenId",
        "InvalidSignatureException",
        "UnrecognizedClientException",
    }
)


class OpenSearchCredentials(BaseModel, frozen=True):
    """Credentials for the OpenSearch service.

    Unset keys fall back to the default boto3 credential chain
    (environment, shared config, instance metadata).
    """

    access_key_id: str | None = None
    secret_access_key: str | None = None
    session_token: str | None = None
    profile_name: str | None = None
    endpoint_url: str | None = None
    """Override the service endpoint (e.g., a local emulator)."""


class OpenSearchParams(BaseModel, frozen=True):
    """Parameters for reserved instance operations."""

    region: str = "us-east-1"
    """Region to list reservations from."""

    max_page_size: int = Field(default=MAX_PAGE_SIZE, ge=MIN_PAGE_SIZE, le=MAX_PAGE_SIZE)
    """Upper bound for `MaxResults` on list calls."""

    stop_on_duplicate_token: bool = True
    """Stop listing when the service repeats a continuation token."""

    verify: bool = True
    """Resolve the caller identity on connect, failing early on bad credentials."""


def _error_kind(error: Exception) -> ErrorKind:
    """Classify a boto3 error."""
    if isinstance(error, ReadTimeoutError | ConnectTimeoutError):
        return ErrorKind.TIMEOUT
    if isinstance(error, ClientError):
        code = error.response.get("Error", {}).get("Code", "Unknown")
        if code in _CREDENTIAL_ERROR_CODES:
            return ErrorKind.CONNECTION
        if code == "ResourceNotFoundException":
            return ErrorKind.NOT_FOUND
    return ErrorKind.PROVIDER


class OpenSearchReservedInstanceProvider:
    """Provider for OpenSearch reserved instances in one region.

    Implements Provider[OpenSearchCredentials, OpenSearchParams] and
    PageFetcher[ReservedInstance].
    """

    __slots__: ClassVar[tuple[str, str, str]] = ("_account_id", "_client", "_params")

    _account_id: str | None
    _client: "OpenSearchServiceClient"
    _params: OpenSearchParams

    def __init__(
        self,
        client: "OpenSearchServiceClient",
        params: OpenSearchParams,
        account_id: str | None = None,
    ) -> None:
        self._client = client
        self._params = params
        self._account_id = account_id

    @property
    def region(self) -> str:
        return self._params.region

    @property
    def account_id(self) -> str | None:
        return self._account_id

    @classmethod
    async def connect(cls, credentials: OpenSearchCredentials, params: OpenSearchParams) -> Self:
        """Create the OpenSearch client for `params.region`."""
        client: OpenSearchServiceClient | None = None
        try:
            session = boto3.Session(
                aws_access_key_id=credentials.access_key_id,
                aws_secret_access_key=credentials.secret_access_key,
                aws_session_token=credentials.session_token,
                profile_name=credentials.profile_name,
                region_name=params.region,
            )
            client = session.client(  # pyright: ignore[reportUnknownMemberType]
                SERVICE_NAME,
                endpoint_url=credentials.endpoint_url,
            )
            account_id: str | None = None
            if params.verify:
                # Fail on bad credentials before any page is requested
                sts = session.client("sts")  # pyright: ignore[reportUnknownMemberType]
                try:
                    identity = await asyncio.to_thread(sts.get_caller_identity)
                finally:
                    sts.close()
                account_id = identity.get("Account")
        except Exception as e:
            if client is not None:
                client.close()
            logger.error(
                "get_client_error",
                extra={"region": params.region, "error_type": type(e).__name__},
            )
            msg = f"Failed to create OpenSearch client in {params.region}: {e}"
            raise DalError(msg, kind=ErrorKind.CONNECTION, source=e) from e

        return cls(client, params, account_id)

    async def disconnect(self) -> None:
        """Close the OpenSearch client."""
        self._client.close()

    async def fetch_page(
        self, request: PageRequest, ctx: PageContext
    ) -> Page[ReservedInstance]:
        """Describe one page of reserved instances."""
        kwargs: dict[str, Any] = {}
        if request.is_filtered:
            kwargs["ReservedInstanceId"] = request.filter
        if request.page_size is not None:
            kwargs["MaxResults"] = request.page_size
        if ctx.token:
            kwargs["NextToken"] = ctx.token

        try:
            response = await asyncio.to_thread(self._client.describe_reserved_instances, **kwargs)
        except (BotoCoreError, ClientError) as e:
            logger.error(
                "api_error",
                extra={
                    "region": self._params.region,
                    "reserved_instance_id": request.filter,
                    "error_type": type(e).__name__,
                },
            )
            msg = f"Failed to describe reserved instances: {e}"
            raise DalError(msg, kind=_error_kind(e), source=e) from e

        try:
            records = [
                ReservedInstance.model_validate(
                    {**item, "Region": self._params.region, "AccountId": self._account_id}
                )
                for item in response.get("ReservedInstances", [])
            ]
        except ValidationError as e:
            msg = f"Unexpected reserved instance shape: {e}"
            raise DalError(msg, source=e) from e

        next_token = response.get("NextToken") or None
        return Page(
            records=records,
            has_more=next_token is not None,
            context=PageContext(token=next_token),
        )

    async def get(self, reserved_instance_id: str | None) -> ReservedInstance | None:
        """Get one reservation by id, or None if it does not exist."""
        return await LookupResolver(self).resolve(reserved_instance_id)

    async def scan(
        self,
        emit: RecordSink[ReservedInstance],
        *,
        reserved_instance_id: str | None = None,
        limit: int | None = None,
    ) -> EnumerationResult:
        """Stream reservations to `emit`, optionally narrowed to one id.

        `limit` bounds the number of records emitted and shrinks the page
        size requested from the service accordingly.
        """
        driver: EnumerationDriver[ReservedInstance] = EnumerationDriver(
            self,
            max_page_size=self._params.max_page_size,
            stop_on_duplicate_token=self._params.stop_on_duplicate_token,
        )
        return await driver.run(emit, filter=reserved_instance_id, ceiling=limit)


def supported_regions(session: "boto3.Session | None" = None, partition: str = "aws") -> list[str]:
    """Regions where the OpenSearch service is available."""
    session = session or boto3.Session()
    return sorted(session.get_available_regions(SERVICE_NAME, partition_name=partition))


async def connect_regions(
    credentials: OpenSearchCredentials,
    params: OpenSearchParams,
    regions: Iterable[str],
) -> dict[str, OpenSearchReservedInstanceProvider]:
    """Connect one provider per region, for use with `enumerate_regions`.

    Providers already connected are closed if a later region fails.
    """
    providers: dict[str, OpenSearchReservedInstanceProvider] = {}
    try:
        for region in regions:
            providers[region] = await OpenSearchReservedInstanceProvider.connect(
                credentials, params.model_copy(update={"region": region})
            )
    except DalError:
        for provider in providers.values():
            await provider.disconnect()
        raise
    return providers


Provider = OpenSearchReservedInstanceProvider
