from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import Dict, Optional, Sequence

from exchanges import build_submission_port
from execution import SessionState, WorkflowOrchestrator
from execution.outcomes import Success
from project_settings import api_wallet_key_from_env, load_network_settings, log_level_from_env
from utils import setup_logging

logger = logging.getLogger(__name__)

def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    setup_logging(level=log_level_from_env())

    if args.command == "serve":
        return _serve(args.host, args.port)

    key = args.key or api_wallet_key_from_env()
    if args.command == "place":
        form = _order_form(args)
        return asyncio.run(_run(key, args.via_relay, place=form))
    return asyncio.run(_run(key, args.via_relay, cancel=_cancel_form(args)))


async def _run(
    key: str,
    relay_url: Optional[str],
    *,
    place: Optional[Dict[str, object]] = None,
    cancel: Optional[Dict[str, object]] = None,
    session: Optional[SessionState] = None,
) -> int:
    session = session or SessionState()
    port = build_submission_port(session.credentials, relay_url=relay_url)
    workflow = WorkflowOrchestrator(port, session)

    try:
        print(await workflow.connect(key))
        if not session.connected:
            return 1

        if relay_url:
            logger.info("Submitting through relay %s", relay_url)
        else:
            logger.info("Submitting directly to %s", load_network_settings().network)

        if place is not None:
            print(await workflow.place_order(place))
        elif cancel is not None:
            print(await workflow.cancel_order(cancel))
        return 0 if isinstance(session.last_outcome, Success) else 1
    finally:
        session.credentials.clear()


def _serve(host: str, port: int) -> int:
    import uvicorn

    uvicorn.run("webapp.app:app", host=host, port=port, log_level="info")
    return 0


def _order_form(args: argparse.Namespace) -> Dict[str, object]:
    form: Dict[str, object] = {
        "instrumentId": args.instrument_id,
        "side": args.side,
        "positionSide": args.position_side,
        "price": args.price,
        "size": args.size,
        "tif": args.tif,
        "cloid": args.cloid,
    }
    if args.market:
        form["isMarket"] = "on"
    if args.reduce_only:
        form["ro"] = "on"
    if args.post_only:
        form["po"] = "on"
    return {name: value for name, value in form.items() if value is not None}


def _cancel_form(args: argparse.Namespace) -> Dict[str, object]:
    form = {"oid": args.oid, "cancelInstrumentId": args.instrument_id}
    return {name: value for name, value in form.items() if value is not None}


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Send Hotstuff trading actions with an API wallet key")
    sub = parser.add_subparsers(dest="command", required=True)

    def add_session_args(cmd: argparse.ArgumentParser) -> None:
        cmd.add_argument("--key", help="API wallet private key (defaults to HOTSTUFF_API_WALLET_KEY)")
        cmd.add_argument("--via-relay", metavar="URL", help="Send through a relay instead of signing directly")

    place = sub.add_parser("place", help="Build and send a single order")
    add_session_args(place)
    place.add_argument("--instrument-id")
    place.add_argument("--side", choices=["b", "s", "buy", "sell"])
    place.add_argument("--position-side", choices=["LONG", "SHORT", "BOTH"])
    place.add_argument("--price")
    place.add_argument("--size")
    place.add_argument("--tif", choices=["GTC", "IOC", "FOK"])
    place.add_argument("--cloid")
    place.add_argument("--market", action="store_true", help="Market order (ignore limit price)")
    place.add_argument("--reduce-only", action="store_true")
    place.add_argument("--post-only", action="store_true")

    cancel = sub.add_parser("cancel", help="Cancel an order by server OID")
    add_session_args(cancel)
    cancel.add_argument("--oid")
    cancel.add_argument("--instrument-id")

    serve = sub.add_parser("serve", help="Run the place-order relay")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)
    return parser


if __name__ == "__main__":
    sys.exit(main())
