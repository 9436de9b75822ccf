"""Turn raw form input into signed-ready order and cancel requests.

The builder is deliberately lenient about identifiers: an absent or
unparsable `instrumentId`/`oid` becomes 0 and enum fields fall back to their
defaults, leaving the exchange as the real gate. Quantities are the exception:
a missing or non-positive size, or a limit order without a usable price, is
reported as a `ValidationMiss` value instead of being sent.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Callable, Dict, Optional, Union

from config import CANCEL_EXPIRY_MS, ORDER_EXPIRY_MS

from .orders import (
    CancelRequest,
    OrderRequest,
    PositionSide,
    RawCancelFields,
    RawOrderFields,
    Side,
    TimeInForce,
)
from .outcomes import Failure, FailureKind

NowFn = Callable[[], int]

# Largest decimal exponent accepted for an id (covers unsigned 64-bit).
_MAX_INDEX_DIGITS = 19

_SIDES: Dict[str, Side] = {
    "b": Side.BUY,
    "buy": Side.BUY,
    "s": Side.SELL,
    "sell": Side.SELL,
}

_TIME_IN_FORCE: Dict[str, TimeInForce] = {
    "gtc": TimeInForce.GOOD_TILL_CANCEL,
    "good-till-cancel": TimeInForce.GOOD_TILL_CANCEL,
    "ioc": TimeInForce.IMMEDIATE_OR_CANCEL,
    "immediate-or-cancel": TimeInForce.IMMEDIATE_OR_CANCEL,
    "fok": TimeInForce.FILL_OR_KILL,
    "fill-or-kill": TimeInForce.FILL_OR_KILL,
}


@dataclass(frozen=True, slots=True)
class ValidationMiss:
    field: str
    message: str

    def to_failure(self) -> Failure:
        return Failure(FailureKind.VALIDATION_MISS, self.message)


def current_millis() -> int:
    return int(time.time() * 1000)


def build_order(
    raw: RawOrderFields, now_fn: NowFn = current_millis
) -> Union[OrderRequest, ValidationMiss]:
    is_market = bool(raw.is_market)

    size = (raw.size or "").strip()
    size_value = _to_decimal(size)
    if size_value is None:
        return ValidationMiss("size", "size must be a decimal number")
    if size_value <= 0:
        return ValidationMiss("size", "size must be greater than zero")

    price = (raw.price or "").strip()
    if not is_market:
        price_value = _to_decimal(price)
        if price_value is None:
            return ValidationMiss("price", "limit orders need a decimal price")
        if price_value <= 0:
            return ValidationMiss("price", "price must be greater than zero")

    return OrderRequest(
        instrument_id=_to_index(raw.instrument_id),
        side=_SIDES.get(_key(raw.side), Side.BUY),
        position_side=_position_side(raw.position_side),
        price=price,
        size=size,
        time_in_force=_TIME_IN_FORCE.get(_key(raw.time_in_force), TimeInForce.GOOD_TILL_CANCEL),
        is_market=is_market,
        expires_at=now_fn() + ORDER_EXPIRY_MS,
        client_order_id=(raw.client_order_id or "").strip(),
        reduce_only=bool(raw.reduce_only),
        post_only=bool(raw.post_only),
        trigger_price=(raw.trigger_price or "").strip(),
        take_profit_stop_loss=(raw.take_profit_stop_loss or "").strip(),
        grouping=(raw.grouping or "").strip(),
    )


def build_cancel(raw: RawCancelFields, now_fn: NowFn = current_millis) -> CancelRequest:
    return CancelRequest(
        order_id=_to_index(raw.order_id),
        instrument_id=_to_index(raw.instrument_id),
        expires_at=now_fn() + CANCEL_EXPIRY_MS,
    )


def _key(value: Optional[str]) -> str:
    return (value or "").strip().lower()


def _position_side(value: Optional[str]) -> PositionSide:
    try:
        return PositionSide((value or "").strip().upper())
    except ValueError:
        return PositionSide.LONG


def _to_decimal(value: str) -> Optional[Decimal]:
    if not value:
        return None
    try:
        number = Decimal(value)
    except (InvalidOperation, ValueError):
        return None
    if not number.is_finite():
        return None
    return number


def _to_index(value: Optional[str]) -> int:
    """Non-negative integer or 0."""
    number = _to_decimal((value or "").strip())
    if number is None or number < 0 or number.adjusted() > _MAX_INDEX_DIGITS:
        return 0
    if number != number.to_integral_value():
        return 0
    return int(number)
