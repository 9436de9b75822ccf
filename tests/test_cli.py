from __future__ import annotations

import asyncio
import contextlib
import io
import unittest

import main
from execution import SessionState
from execution.builder import build_order
from execution.orders import OrderRequest, RawOrderFields


class CommandLineTestCase(unittest.TestCase):
    def test_place_arguments_map_to_form_fields(self) -> None:
        args = main._build_parser().parse_args(
            ["place", "--instrument-id", "5", "--side", "s", "--price", "100", "--size", "2", "--market"]
        )
        form = main._order_form(args)
        self.assertEqual(
            form,
            {"instrumentId": "5", "side": "s", "price": "100", "size": "2", "isMarket": "on"},
        )
        order = build_order(RawOrderFields.from_form(form), lambda: 0)
        assert isinstance(order, OrderRequest)
        self.assertTrue(order.is_market)

    def test_cancel_arguments_map_to_form_fields(self) -> None:
        args = main._build_parser().parse_args(["cancel", "--oid", "9", "--instrument-id", "2"])
        self.assertEqual(main._cancel_form(args), {"oid": "9", "cancelInstrumentId": "2"})

    def test_missing_key_stops_before_submission(self) -> None:
        out = io.StringIO()
        with contextlib.redirect_stdout(out):
            code = asyncio.run(main._run("", None, place={"size": "1", "price": "1"}))
        self.assertEqual(code, 1)
        self.assertIn("Enter your API wallet private key first.", out.getvalue())

    def test_key_is_cleared_once_the_run_finishes(self) -> None:
        session = SessionState()
        out = io.StringIO()
        with contextlib.redirect_stdout(out):
            code = asyncio.run(
                main._run(
                    "0x" + "11" * 32,
                    "http://relay.local",
                    cancel={"oid": "9"},
                    session=session,
                )
            )
        # The relay port answers cancels locally, so nothing leaves the process.
        self.assertEqual(code, 1)
        self.assertIn("API wallet key captured.", out.getvalue())
        self.assertFalse(session.connected)


if __name__ == "__main__":
    unittest.main()
