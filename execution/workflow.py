from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, Mapping, Optional, Union

from .builder import NowFn, ValidationMiss, build_cancel, build_order, current_millis
from .credentials import CredentialHolder
from .orders import RawCancelFields, RawOrderFields
from .outcomes import Failure, FailureKind, Success, SubmissionOutcome

if TYPE_CHECKING:
    from exchanges.base import SubmissionPort

logger = logging.getLogger(__name__)

ENTER_KEY_MESSAGE = "Enter your API wallet private key first."
CONNECTED_MESSAGE = "API wallet key captured. Ready to send trading actions."
NOT_CONNECTED_MESSAGE = "Connect your API wallet first."
PLACING_MESSAGE = "Placing order…"
CANCELLING_MESSAGE = "Sending cancel request…"

_ORDER_MESSAGES: Dict[Optional[FailureKind], str] = {
    None: "Order placed successfully.",
    FailureKind.VALIDATION_MISS: "Invalid order: {message}",
    FailureKind.NETWORK_TIMEOUT: "Exchange did not respond in time while placing order.",
    FailureKind.UPSTREAM_REJECTED: "Exchange rejected the order: {message}",
    FailureKind.INVALID_CREDENTIAL: "API wallet key is not a valid private key.",
    FailureKind.NOT_CONNECTED: NOT_CONNECTED_MESSAGE,
    FailureKind.MISCONFIGURED: "Trading backend is not configured: {message}",
}

_CANCEL_MESSAGES: Dict[Optional[FailureKind], str] = {
    None: "Order cancel request sent.",
    FailureKind.VALIDATION_MISS: "Invalid cancel: {message}",
    FailureKind.NETWORK_TIMEOUT: "Exchange did not respond in time while cancelling order.",
    FailureKind.UPSTREAM_REJECTED: "Exchange rejected the cancel: {message}",
    FailureKind.INVALID_CREDENTIAL: "API wallet key is not a valid private key.",
    FailureKind.NOT_CONNECTED: NOT_CONNECTED_MESSAGE,
    FailureKind.MISCONFIGURED: "Trading backend is not configured: {message}",
}

_ORDER_FALLBACK = "Network or server error while placing order."
_CANCEL_FALLBACK = "Network or server error while cancelling order."


class WorkflowState(str, Enum):
    DISCONNECTED = "disconnected"
    CONNECTED = "connected"
    PLACING = "placing"
    CANCELLING = "cancelling"


@dataclass(slots=True)
class SessionState:
    """Everything one session mutates: the key, busy flags and the status line."""

    credentials: CredentialHolder = field(default_factory=CredentialHolder)
    status: Optional[str] = None
    is_placing: bool = False
    is_cancelling: bool = False
    last_outcome: Optional[SubmissionOutcome] = None

    @property
    def connected(self) -> bool:
        return self.credentials.connected

    @property
    def phase(self) -> WorkflowState:
        if not self.connected:
            return WorkflowState.DISCONNECTED
        if self.is_placing:
            return WorkflowState.PLACING
        if self.is_cancelling:
            return WorkflowState.CANCELLING
        return WorkflowState.CONNECTED


class WorkflowOrchestrator:
    """Sequences connect -> build -> submit -> report for a single session.

    Each public coroutine returns the status line it leaves behind. Placement
    and cancellation have independent busy flags; a placement attempted while
    another is in flight is ignored rather than queued.
    """

    def __init__(
        self,
        port: SubmissionPort,
        session: SessionState | None = None,
        *,
        now_fn: NowFn = current_millis,
    ) -> None:
        self._port = port
        self.session = session or SessionState()
        self._now_fn = now_fn

    @property
    def status(self) -> Optional[str]:
        return self.session.status

    async def connect(self, private_key: str) -> str:
        if not self.session.credentials.connect(private_key):
            return self._set_status(ENTER_KEY_MESSAGE)
        logger.info("API wallet key captured")
        return self._set_status(CONNECTED_MESSAGE)

    async def place_order(self, form: Union[RawOrderFields, Mapping[str, Any]]) -> str:
        if self.session.is_placing:
            logger.debug("Placement already in flight; ignoring submit")
            return self.session.status or ""
        if not self.session.connected:
            return self._set_status(NOT_CONNECTED_MESSAGE)

        raw = form if isinstance(form, RawOrderFields) else RawOrderFields.from_form(form)
        built = build_order(raw, self._now_fn)
        if isinstance(built, ValidationMiss):
            logger.info("Order not sent: %s (%s)", built.message, built.field)
            return self._finish(built.to_failure(), _ORDER_MESSAGES, _ORDER_FALLBACK)

        self.session.is_placing = True
        self._set_status(PLACING_MESSAGE)
        try:
            outcome = await self._port.place_order(built)
        except Exception as exc:  # pylint: disable=broad-except
            logger.exception("Order placement raised")
            outcome = Failure(FailureKind.UNEXPECTED_FAULT, str(exc))
        finally:
            self.session.is_placing = False
        return self._finish(outcome, _ORDER_MESSAGES, _ORDER_FALLBACK)

    async def cancel_order(self, form: Union[RawCancelFields, Mapping[str, Any]]) -> str:
        if self.session.is_cancelling:
            logger.debug("Cancel already in flight; ignoring submit")
            return self.session.status or ""
        if not self.session.connected:
            return self._set_status(NOT_CONNECTED_MESSAGE)

        raw = form if isinstance(form, RawCancelFields) else RawCancelFields.from_form(form)
        cancel = build_cancel(raw, self._now_fn)

        self.session.is_cancelling = True
        self._set_status(CANCELLING_MESSAGE)
        try:
            outcome = await self._port.cancel_by_oid(cancel)
        except Exception as exc:  # pylint: disable=broad-except
            logger.exception("Cancel request raised")
            outcome = Failure(FailureKind.UNEXPECTED_FAULT, str(exc))
        finally:
            self.session.is_cancelling = False
        return self._finish(outcome, _CANCEL_MESSAGES, _CANCEL_FALLBACK)

    def _finish(
        self,
        outcome: SubmissionOutcome,
        messages: Mapping[Optional[FailureKind], str],
        fallback: str,
    ) -> str:
        self.session.last_outcome = outcome
        return self._set_status(describe_outcome(outcome, messages, fallback))

    def _set_status(self, message: str) -> str:
        self.session.status = message
        return message


def describe_outcome(
    outcome: SubmissionOutcome,
    messages: Mapping[Optional[FailureKind], str],
    fallback: str,
) -> str:
    if isinstance(outcome, Success):
        return messages[None]
    template = messages.get(outcome.kind)
    if template is None:
        return fallback
    return template.format(message=outcome.message or "no reason given")
