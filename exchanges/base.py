from __future__ import annotations

from abc import ABC, abstractmethod

from execution.orders import CancelRequest, OrderRequest
from execution.outcomes import SubmissionOutcome


class SubmissionPort(ABC):
    """Base interface for anything that can deliver trading actions.

    Implementations never raise for transport or upstream problems; every
    result comes back as a `SubmissionOutcome`.
    """

    name: str

    @abstractmethod
    async def place_order(self, order: OrderRequest) -> SubmissionOutcome:
        """Submit a single order as a one-element batch."""

    @abstractmethod
    async def cancel_by_oid(self, cancel: CancelRequest) -> SubmissionOutcome:
        """Cancel a single order by its exchange-assigned id."""
