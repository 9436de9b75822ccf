from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Union


class FailureKind(str, Enum):
    MISCONFIGURED = "misconfigured"
    NOT_CONNECTED = "not_connected"
    VALIDATION_MISS = "validation_miss"
    INVALID_CREDENTIAL = "invalid_credential"
    NETWORK_TIMEOUT = "network_timeout"
    NETWORK_ERROR = "network_error"
    UPSTREAM_REJECTED = "upstream_rejected"
    UNEXPECTED_FAULT = "unexpected_fault"


@dataclass(frozen=True, slots=True)
class Success:
    """Accepted submission; `payload` echoes what the exchange returned."""

    payload: Dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class Failure:
    kind: FailureKind
    message: str = ""

    @property
    def ok(self) -> bool:
        return False


SubmissionOutcome = Union[Success, Failure]
