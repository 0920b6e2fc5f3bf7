# Wallet session
"""
Login sessions on top of the wallet store.

A session is the public half of a wallet plus a creation time, persisted
separately from the keypair::

    {"address": "0x<publicKeyHex>", "publicKey": "<publicKeyHex>", "createdAt": <unix ms>}

:func:`create_wallet` and :func:`import_wallet` are the two entry points a
front end needs: both derive a keypair, persist it, open a session and
return the pair together with the session.
"""

import json
import logging
import time
from typing import NamedTuple, Optional, Tuple

from .encoding import decode_hex
from .errors import InvalidKeyMaterial, NotConnected, StorageUnavailable
from .keys import KeyPair, derive
from .store import KeyValueStore, WalletStore

log = logging.getLogger(__name__)

SESSION_KEY = "lumina_wallet_session_v1"


class Session(NamedTuple):
    address: str
    public_key: str
    created_at: int

    def to_record(self) -> dict:
        return {
            "address": self.address,
            "publicKey": self.public_key,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_record(cls, record: dict) -> "Session":
        return cls(
            address=str(record["address"]),
            public_key=str(record["publicKey"]),
            created_at=int(record["createdAt"]),
        )


def wallet_login(store: Optional[KeyValueStore], address: str, public_key_hex: str,
                 now: Optional[int] = None) -> Session:
    created_at = int(time.time() * 1000) if now is None else int(now)
    session = Session(address=address, public_key=public_key_hex, created_at=created_at)
    if store is not None:
        store.set(SESSION_KEY, json.dumps(session.to_record()))
    log.info("Logged in %s", address)
    return session


def get_session(store: Optional[KeyValueStore]) -> Optional[Session]:
    if store is None:
        return None
    try:
        raw = store.get(SESSION_KEY)
    except StorageUnavailable:
        log.exception("Failed to read session record")
        return None
    if not raw:
        return None
    try:
        return Session.from_record(json.loads(raw))
    except (ValueError, KeyError, TypeError) as e:
        log.warning("Discarding unreadable session record: %s", e)
        return None


def require_session(store: Optional[KeyValueStore]) -> Session:
    s = get_session(store)
    if s is None:
        raise NotConnected("Wallet not connected")
    return s


def logout(store: Optional[KeyValueStore]) -> None:
    """Forget the session and the stored keypair."""
    if store is None:
        return
    store.remove(SESSION_KEY)
    WalletStore(store).clear()
    log.info("Logged out")


def _open(store: Optional[KeyValueStore], keypair: KeyPair) -> Tuple[KeyPair, Session]:
    wallets = WalletStore(store)
    wallets.store_wallet(keypair)
    try:
        session = wallet_login(store, keypair.address, keypair.public_key_hex)
    except StorageUnavailable:
        # never leave a stored wallet without its session
        try:
            wallets.clear()
        except StorageUnavailable:
            log.exception("Failed to remove wallet record after login failure")
        raise
    return keypair, session


def create_wallet(store: Optional[KeyValueStore]) -> Tuple[KeyPair, Session]:
    return _open(store, derive())


def import_wallet(store: Optional[KeyValueStore], text: str,
                  verify_expanded: bool = False) -> Tuple[KeyPair, Session]:
    """Import a wallet from user-supplied hex.

    ``text`` may carry a ``0x`` prefix and any letter case, and must encode
    either a 32-byte seed or a 64-byte secret key. Nothing is persisted
    unless decoding and derivation both succeed.
    """
    raw = decode_hex(text)
    if not raw:
        # import never falls through to fresh generation
        raise InvalidKeyMaterial("expected 32-byte seed or 64-byte secret key")
    return _open(store, derive(raw, verify_expanded=verify_expanded))
