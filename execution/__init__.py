"""Trading action submission: order building, credentials and the session workflow."""

from .builder import ValidationMiss, build_cancel, build_order, current_millis
from .credentials import CredentialHolder, SigningIdentity
from .orders import (
    CancelRequest,
    OrderRequest,
    PositionSide,
    RawCancelFields,
    RawOrderFields,
    Side,
    TimeInForce,
)
from .outcomes import Failure, FailureKind, Success, SubmissionOutcome
from .workflow import SessionState, WorkflowOrchestrator, WorkflowState

__all__ = [
    "CredentialHolder",
    "SigningIdentity",
    "OrderRequest",
    "CancelRequest",
    "RawOrderFields",
    "RawCancelFields",
    "Side",
    "PositionSide",
    "TimeInForce",
    "ValidationMiss",
    "build_order",
    "build_cancel",
    "current_millis",
    "Success",
    "Failure",
    "FailureKind",
    "SubmissionOutcome",
    "SessionState",
    "WorkflowOrchestrator",
    "WorkflowState",
]
