"""Submission port registry."""

from __future__ import annotations

from execution.credentials import CredentialHolder

from .base import SubmissionPort
from .hotstuff import HotstuffExchangeClient
from .relay import RelaySubmissionPort


def build_submission_port(
    credentials: CredentialHolder,
    relay_url: str | None = None,
) -> SubmissionPort:
    """Direct signed submission unless a relay URL is given."""
    if relay_url:
        return RelaySubmissionPort(relay_url)
    return HotstuffExchangeClient(credentials)


__all__ = [
    "SubmissionPort",
    "HotstuffExchangeClient",
    "RelaySubmissionPort",
    "build_submission_port",
]
