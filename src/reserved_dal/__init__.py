"""Data abstraction layer for reserved capacity inventory."""

from reserved_dal.enumeration import EnumerationDriver, EnumerationResult, StopReason
from reserved_dal.errors import DalError, ErrorKind
from reserved_dal.fanout import FanOutResult, enumerate_regions
from reserved_dal.lookup import LookupResolver
from reserved_dal.pagination import Paginator, resolve_page_size
from reserved_dal.protocols import PageFetcher, Provider, RecordSink

__all__ = [
    "DalError",
    "EnumerationDriver",
    "EnumerationResult",
    "ErrorKind",
    "FanOutResult",
    "LookupResolver",
    "PageFetcher",
    "Paginator",
    "Provider",
    "RecordSink",
    "StopReason",
    "enumerate_regions",
    "resolve_page_size",
]
