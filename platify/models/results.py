"""Outcome of a single upstream fetch.

A fetch ends in exactly one of three states: the record was found and fully
decoded, the upstream reported it does not exist, or something transient went
wrong. The page renderer consumes these uniformly for every resource kind.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar, Union

T = TypeVar("T")


class FetchFailure(str, Enum):
    """Why a fetch produced no record."""

    TIMEOUT = "timeout"
    TRANSPORT = "transport"
    UNEXPECTED_STATUS = "unexpected_status"
    DECODE = "decode"


@dataclass(frozen=True)
class Found(Generic[T]):
    value: T


@dataclass(frozen=True)
class NotFound:
    pass


@dataclass(frozen=True)
class TransientError:
    cause: FetchFailure
    detail: str = ""


FetchResult = Union[Found[T], NotFound, TransientError]
