from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

import aiohttp

from execution.outcomes import Failure, FailureKind, Success, SubmissionOutcome

logger = logging.getLogger(__name__)

SessionFactory = Callable[..., aiohttp.ClientSession]

_JSON_HEADERS = {"Content-Type": "application/json", "Accept": "application/json"}


async def post_json(
    url: str,
    body: Any,
    *,
    timeout_seconds: float,
    session_factory: SessionFactory = aiohttp.ClientSession,
) -> Tuple[int, bytes]:
    """POST `body` as JSON and return the raw status and body bytes."""
    timeout = aiohttp.ClientTimeout(total=timeout_seconds)
    async with session_factory(timeout=timeout, headers=_JSON_HEADERS) as session:
        async with session.post(url, data=json.dumps(body)) as resp:
            raw = await resp.read()
            return resp.status, raw


def parse_json_body(raw: bytes | None) -> Any:
    """Decode a JSON body; empty or unparsable bodies become `{}`."""
    if not raw:
        return {}
    try:
        return json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError):
        return {}


def rejection_reason(status: int, payload: Any) -> Optional[str]:
    """Return the upstream's reason when the response is a rejection."""
    data: Mapping[str, Any] = payload if isinstance(payload, dict) else {}
    if not 200 <= status < 300:
        reason = data.get("error") or data.get("message")
        return str(reason) if reason else f"HTTP {status}"
    if data.get("error"):
        return str(data["error"])
    if str(data.get("status", "")).lower() == "err":
        return str(data.get("response") or "rejected")
    return None


async def submit_json(
    url: str,
    body: Any,
    *,
    label: str,
    timeout_seconds: float,
    session_factory: SessionFactory = aiohttp.ClientSession,
) -> SubmissionOutcome:
    try:
        status, raw = await post_json(
            url,
            body,
            timeout_seconds=timeout_seconds,
            session_factory=session_factory,
        )
    except asyncio.TimeoutError:
        logger.warning("%s timed out after %.1fs (%s)", label, timeout_seconds, url)
        return Failure(
            FailureKind.NETWORK_TIMEOUT,
            f"No response within {int(timeout_seconds * 1000)} ms",
        )
    except aiohttp.ClientError as exc:
        logger.warning("%s request failed: %r", label, exc)
        return Failure(FailureKind.NETWORK_ERROR, str(exc) or exc.__class__.__name__)
    except Exception as exc:  # pylint: disable=broad-except
        logger.exception("%s failed unexpectedly", label)
        return Failure(FailureKind.UNEXPECTED_FAULT, str(exc) or exc.__class__.__name__)

    payload = parse_json_body(raw)
    reason = rejection_reason(status, payload)
    if reason is not None:
        logger.warning("%s rejected (HTTP %s): %s", label, status, reason)
        return Failure(FailureKind.UPSTREAM_REJECTED, reason)

    logger.info("%s accepted (HTTP %s)", label, status)
    echo: Dict[str, Any] = payload if isinstance(payload, dict) else {"response": payload}
    return Success(echo)
