from __future__ import annotations

import json
from typing import Any, Mapping, Optional

from eth_account import Account
from eth_account.messages import encode_defunct
from eth_account.signers.local import LocalAccount


class CredentialError(Exception):
    """Base class for API wallet credential problems."""


class NotConnectedError(CredentialError):
    pass


class InvalidCredentialError(CredentialError):
    pass


def canonical_json(payload: Mapping[str, Any]) -> str:
    return json.dumps(payload, sort_keys=True, separators=(",", ":"))


class SigningIdentity:
    """Signer derived from the API wallet key.

    Only the public address is ever exposed; repr and str never include key
    material.
    """

    __slots__ = ("_account",)

    def __init__(self, account: LocalAccount) -> None:
        self._account = account

    @classmethod
    def from_private_key(cls, private_key: str) -> "SigningIdentity":
        try:
            account = Account.from_key(private_key)
        except Exception as exc:  # pylint: disable=broad-except
            # eth-account raises a mix of ValueError and eth_keys errors here.
            raise InvalidCredentialError("API wallet key is not a valid private key") from exc
        return cls(account)

    @property
    def address(self) -> str:
        return self._account.address

    def sign(self, payload: Mapping[str, Any]) -> str:
        message = encode_defunct(text=canonical_json(payload))
        signed = self._account.sign_message(message)
        return "0x" + bytes(signed.signature).hex()

    def __repr__(self) -> str:
        return f"SigningIdentity(address={self.address})"

    __str__ = __repr__


class CredentialHolder:
    """Session-scoped holder of the API wallet key.

    `connect` only captures the key; validity is discovered the first time an
    identity is derived. Nothing is persisted.
    """

    def __init__(self) -> None:
        self._private_key: str = ""
        self._identity: Optional[SigningIdentity] = None

    @property
    def connected(self) -> bool:
        return bool(self._private_key)

    def connect(self, private_key: str) -> bool:
        candidate = (private_key or "").strip()
        if not candidate:
            return False
        self._private_key = candidate
        self._identity = None
        return True

    def clear(self) -> None:
        self._private_key = ""
        self._identity = None

    def identity(self) -> SigningIdentity:
        if not self._private_key:
            raise NotConnectedError("No API wallet key captured")
        if self._identity is None:
            self._identity = SigningIdentity.from_private_key(self._private_key)
        return self._identity

    def __repr__(self) -> str:
        return f"CredentialHolder(connected={self.connected})"
