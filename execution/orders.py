from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Optional


class Side(str, Enum):
    BUY = "buy"
    SELL = "sell"

    @property
    def wire(self) -> str:
        return "b" if self is Side.BUY else "s"


class PositionSide(str, Enum):
    LONG = "LONG"
    SHORT = "SHORT"
    BOTH = "BOTH"


class TimeInForce(str, Enum):
    GOOD_TILL_CANCEL = "GTC"
    IMMEDIATE_OR_CANCEL = "IOC"
    FILL_OR_KILL = "FOK"


@dataclass(frozen=True, slots=True)
class OrderRequest:
    """A single, fully specified order ready to be signed."""

    instrument_id: int
    side: Side
    position_side: PositionSide
    price: str
    size: str
    time_in_force: TimeInForce
    is_market: bool
    expires_at: int  # epoch ms
    client_order_id: str = ""
    reduce_only: bool = False
    post_only: bool = False
    trigger_price: str = ""
    take_profit_stop_loss: str = ""
    grouping: str = ""

    def to_wire(self) -> Dict[str, Any]:
        return {
            "instrumentId": self.instrument_id,
            "side": self.side.wire,
            "positionSide": self.position_side.value,
            "price": self.price,
            "size": self.size,
            "tif": self.time_in_force.value,
            "ro": self.reduce_only,
            "po": self.post_only,
            "cloid": self.client_order_id,
            "triggerPx": self.trigger_price,
            "isMarket": self.is_market,
            "tpsl": self.take_profit_stop_loss,
            "grouping": self.grouping,
        }


@dataclass(frozen=True, slots=True)
class CancelRequest:
    order_id: int
    instrument_id: int
    expires_at: int  # epoch ms

    def to_wire(self) -> Dict[str, Any]:
        return {"oid": self.order_id, "instrumentId": self.instrument_id}


@dataclass(slots=True)
class RawOrderFields:
    """Loosely typed order input as it arrives from a form.

    Every field is optional; `execution.builder.build_order` owns the
    defaulting rules.
    """

    instrument_id: Optional[str] = None
    side: Optional[str] = None
    position_side: Optional[str] = None
    price: Optional[str] = None
    size: Optional[str] = None
    time_in_force: Optional[str] = None
    is_market: Optional[bool] = None
    client_order_id: Optional[str] = None
    reduce_only: Optional[bool] = None
    post_only: Optional[bool] = None
    trigger_price: Optional[str] = None
    take_profit_stop_loss: Optional[str] = None
    grouping: Optional[str] = None

    @classmethod
    def from_form(cls, form: Mapping[str, Any]) -> "RawOrderFields":
        return cls(
            instrument_id=_text(form.get("instrumentId")),
            side=_text(form.get("side")),
            position_side=_text(form.get("positionSide")),
            price=_text(form.get("price")),
            size=_text(form.get("size")),
            time_in_force=_text(form.get("tif")),
            is_market=_checkbox(form.get("isMarket")),
            client_order_id=_text(form.get("cloid")),
            reduce_only=_checkbox(form.get("ro")),
            post_only=_checkbox(form.get("po")),
            trigger_price=_text(form.get("triggerPx")),
            take_profit_stop_loss=_text(form.get("tpsl")),
            grouping=_text(form.get("grouping")),
        )


@dataclass(slots=True)
class RawCancelFields:
    order_id: Optional[str] = None
    instrument_id: Optional[str] = None

    @classmethod
    def from_form(cls, form: Mapping[str, Any]) -> "RawCancelFields":
        return cls(
            order_id=_text(form.get("oid")),
            instrument_id=_text(form.get("cancelInstrumentId")),
        )


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


def _checkbox(value: Any) -> Optional[bool]:
    # HTML checkboxes submit "on" when ticked and nothing otherwise.
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("on", "true", "1", "yes")
