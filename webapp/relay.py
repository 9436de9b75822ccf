from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional, Tuple
from urllib.parse import urljoin

import aiohttp

from config import RELAY_PLACE_ORDER_PATH, REQUEST_TIMEOUT_MS
from exchanges.transport import SessionFactory, post_json
from execution.outcomes import Failure, FailureKind, Success, SubmissionOutcome
from project_settings import RelaySettings, load_relay_settings

logger = logging.getLogger(__name__)

CONFIG_ERROR_MESSAGE = "TRADING_BACKEND_URL is not set on the server."
UPSTREAM_FALLBACK_MESSAGE = "Upstream place-order failed."
FORWARD_FALLBACK_MESSAGE = "Failed to place order."


@dataclass(frozen=True, slots=True)
class RelayResponse:
    """HTTP-shaped result of a relay forward.

    `raw` carries the upstream body bytes when they should be returned
    verbatim; otherwise `body` is serialised.
    """

    status_code: int
    body: Any
    raw: Optional[bytes] = None
    failure_kind: Optional[FailureKind] = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def to_outcome(self) -> SubmissionOutcome:
        if self.ok:
            return Success(self.body if isinstance(self.body, dict) else {"response": self.body})
        message = self.body.get("error") if isinstance(self.body, dict) else None
        return Failure(
            self.failure_kind or FailureKind.UNEXPECTED_FAULT,
            str(message) if message is not None else "",
        )


class RelayProxy:
    """Forwards already-built order payloads to the trading backend.

    The backend URL is read per request; a missing URL is answered with a
    fixed configuration error before any network call is attempted.
    """

    def __init__(
        self,
        *,
        settings_loader: Callable[[], RelaySettings] = load_relay_settings,
        session_factory: SessionFactory = aiohttp.ClientSession,
        timeout_ms: int = REQUEST_TIMEOUT_MS,
    ) -> None:
        self._settings_loader = settings_loader
        self._session_factory = session_factory
        self._timeout_seconds = timeout_ms / 1000.0

    def misconfigured(self, settings: RelaySettings | None = None) -> Optional[RelayResponse]:
        """Return the configuration error response, or None when a backend is set."""
        settings = settings or self._settings_loader()
        if settings.configured:
            return None
        logger.error("Relay request refused: %s", CONFIG_ERROR_MESSAGE)
        return RelayResponse(
            500,
            {"error": CONFIG_ERROR_MESSAGE},
            failure_kind=FailureKind.MISCONFIGURED,
        )

    async def forward(self, payload: Any) -> RelayResponse:
        settings = self._settings_loader()
        refused = self.misconfigured(settings)
        if refused is not None:
            return refused

        url = urljoin(settings.backend_url, RELAY_PLACE_ORDER_PATH)
        try:
            status, raw = await post_json(
                url,
                payload,
                timeout_seconds=self._timeout_seconds,
                session_factory=self._session_factory,
            )
        except asyncio.TimeoutError as exc:
            logger.warning("Relay forward to %s timed out", url)
            return self.fault(exc, FailureKind.NETWORK_TIMEOUT)
        except Exception as exc:  # pylint: disable=broad-except
            logger.exception("Relay forward to %s failed", url)
            return self.fault(exc)

        data, parsed = _decode(raw)
        if not 200 <= status < 300:
            error = data.get("error") if isinstance(data, dict) else None
            logger.warning("Upstream place-order returned HTTP %s: %s", status, error)
            return RelayResponse(
                status,
                {"error": error if error is not None else UPSTREAM_FALLBACK_MESSAGE},
                failure_kind=FailureKind.UPSTREAM_REJECTED,
            )

        logger.info("Upstream place-order accepted (HTTP %s)", status)
        if not parsed:
            # Empty or non-JSON success (e.g. 204) is answered as 200 {}.
            return RelayResponse(200, {})
        return RelayResponse(status, data, raw=raw)

    @staticmethod
    def fault(
        exc: BaseException,
        kind: FailureKind = FailureKind.UNEXPECTED_FAULT,
    ) -> RelayResponse:
        return RelayResponse(
            500,
            {"error": str(exc) or FORWARD_FALLBACK_MESSAGE},
            failure_kind=kind,
        )


def _decode(raw: bytes | None) -> Tuple[Any, bool]:
    if not raw:
        return {}, False
    try:
        return json.loads(raw.decode("utf-8")), True
    except (UnicodeDecodeError, json.JSONDecodeError):
        return {}, False
