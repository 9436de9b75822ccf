from __future__ import annotations

import logging
from typing import Any, Callable, Dict

import aiohttp

from execution.credentials import (
    CredentialHolder,
    InvalidCredentialError,
    NotConnectedError,
)
from execution.orders import CancelRequest, OrderRequest
from execution.outcomes import Failure, FailureKind, SubmissionOutcome
from project_settings import NetworkSettings, load_network_settings

from .base import SubmissionPort
from .transport import SessionFactory, submit_json

logger = logging.getLogger(__name__)


class HotstuffExchangeClient(SubmissionPort):
    """Signs trading actions with the API wallet and posts them to Hotstuff.

    The exchange API is batch-shaped, so single orders and cancels are wrapped
    in one-element lists. The target network is resolved on every call.
    """

    name = "hotstuff"

    def __init__(
        self,
        credentials: CredentialHolder,
        *,
        settings_loader: Callable[[], NetworkSettings] = load_network_settings,
        session_factory: SessionFactory = aiohttp.ClientSession,
    ) -> None:
        self._credentials = credentials
        self._settings_loader = settings_loader
        self._session_factory = session_factory

    async def place_order(self, order: OrderRequest) -> SubmissionOutcome:
        action = {
            "type": "order",
            "orders": [order.to_wire()],
            "expiresAfter": order.expires_at,
        }
        return await self._submit(action, label="placeOrder")

    async def cancel_by_oid(self, cancel: CancelRequest) -> SubmissionOutcome:
        action = {
            "type": "cancelByOid",
            "cancels": [cancel.to_wire()],
            "expiresAfter": cancel.expires_at,
        }
        return await self._submit(action, label="cancelByOid")

    async def _submit(self, action: Dict[str, Any], *, label: str) -> SubmissionOutcome:
        try:
            identity = self._credentials.identity()
        except NotConnectedError as exc:
            return Failure(FailureKind.NOT_CONNECTED, str(exc))
        except InvalidCredentialError as exc:
            logger.warning("Hotstuff %s: %s", label, exc)
            return Failure(FailureKind.INVALID_CREDENTIAL, str(exc))

        network = self._settings_loader()
        try:
            signature = identity.sign(action)
        except Exception as exc:  # pylint: disable=broad-except
            logger.exception("Hotstuff %s: signing failed", label)
            return Failure(FailureKind.UNEXPECTED_FAULT, str(exc) or "signing failed")

        logger.info(
            "Hotstuff %s via %s for %s",
            label,
            network.network,
            identity.address,
        )
        # Placeholder envelope (EIP-191 over canonical JSON); not yet checked
        # against the exchange SDK's published signing scheme.
        body = {"action": action, "signature": signature, "address": identity.address}
        return await submit_json(
            network.exchange_url,
            body,
            label=f"Hotstuff {label}",
            timeout_seconds=network.timeout_seconds,
            session_factory=self._session_factory,
        )
