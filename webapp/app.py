from __future__ import annotations

import logging

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel

from .relay import RelayProxy, RelayResponse

logger = logging.getLogger(__name__)

app = FastAPI(title="Trading Ducky Relay", version="0.1.0")

relay_proxy = RelayProxy()


class HealthPayload(BaseModel):
    status: str = "ok"


def get_relay_proxy() -> RelayProxy:
    return relay_proxy


@app.get("/health", response_model=HealthPayload)
async def health() -> HealthPayload:
    return HealthPayload()


@app.post("/place-order")
async def place_order(
    request: Request,
    proxy: RelayProxy = Depends(get_relay_proxy),
) -> Response:
    try:
        result = proxy.misconfigured()
        if result is None:
            payload = await request.json()
            result = await proxy.forward(payload)
    except Exception as exc:  # pylint: disable=broad-except
        logger.exception("place-order relay failed")
        result = RelayProxy.fault(exc)

    outcome = result.to_outcome()
    if not outcome.ok:
        logger.warning(
            "place-order relay answered HTTP %s (%s): %s",
            result.status_code,
            outcome.kind.value,
            outcome.message,
        )
    return _to_response(result)


def _to_response(result: RelayResponse) -> Response:
    if result.raw is not None:
        return Response(
            content=result.raw,
            status_code=result.status_code,
            media_type="application/json",
        )
    return JSONResponse(result.body, status_code=result.status_code)
