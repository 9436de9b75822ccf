from __future__ import annotations

from urllib.parse import urljoin

import aiohttp

from config import RELAY_PLACE_ORDER_PATH, REQUEST_TIMEOUT_MS
from execution.orders import CancelRequest, OrderRequest
from execution.outcomes import Failure, FailureKind, SubmissionOutcome

from .base import SubmissionPort
from .transport import SessionFactory, submit_json


class RelaySubmissionPort(SubmissionPort):
    """Sends built orders to a same-origin relay instead of the exchange.

    The relay holds no signing material and only exposes order placement.
    """

    name = "relay"

    def __init__(
        self,
        relay_url: str,
        *,
        timeout_ms: int = REQUEST_TIMEOUT_MS,
        session_factory: SessionFactory = aiohttp.ClientSession,
    ) -> None:
        self._relay_url = relay_url
        self._timeout_seconds = timeout_ms / 1000.0
        self._session_factory = session_factory

    @property
    def endpoint(self) -> str:
        return urljoin(self._relay_url, RELAY_PLACE_ORDER_PATH)

    async def place_order(self, order: OrderRequest) -> SubmissionOutcome:
        payload = {"orders": [order.to_wire()], "expiresAfter": order.expires_at}
        return await submit_json(
            self.endpoint,
            payload,
            label="Relay place-order",
            timeout_seconds=self._timeout_seconds,
            session_factory=self._session_factory,
        )

    async def cancel_by_oid(self, cancel: CancelRequest) -> SubmissionOutcome:
        return Failure(
            FailureKind.MISCONFIGURED,
            "the relay only forwards order placement",
        )
