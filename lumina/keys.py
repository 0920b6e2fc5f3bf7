# Ed25519 wallet keys
"""
Ed25519 key derivation and signing for Lumina wallets.

A wallet is one flat Ed25519 keypair. :func:`derive` builds it from one of
three inputs:

* nothing (or empty bytes): a fresh keypair from libsodium's CSPRNG;
* a 32-byte seed: deterministic expansion, ``secret_key = seed || public_key``;
* a 64-byte secret key in that same layout: taken as-is, with the public
  key read from its last 32 bytes.

Signatures are standard deterministic Ed25519 (RFC 8032) computed by
libsodium over the 64-byte secret key, so the same key and message always
give the same 64-byte signature.
"""

import enum
import logging
from typing import NamedTuple, Optional

from nacl.bindings import crypto_sign, crypto_sign_BYTES
from nacl.encoding import RawEncoder
from nacl.exceptions import BadSignatureError
from nacl.signing import SigningKey, VerifyKey

from .encoding import encode_hex
from .errors import InvalidKeyMaterial

log = logging.getLogger(__name__)

SEED_SIZE = 32
PUBLIC_KEY_SIZE = 32
SECRET_KEY_SIZE = 64
SIGNATURE_SIZE = crypto_sign_BYTES


class KeyPair(NamedTuple):
    public_key: bytes
    secret_key: bytes

    @property
    def public_key_hex(self) -> str:
        return encode_hex(self.public_key)

    @property
    def secret_key_hex(self) -> str:
        return encode_hex(self.secret_key)

    @property
    def address(self) -> str:
        return address_of(self.public_key)

    def __repr__(self) -> str:
        # keep secret bytes out of tracebacks and log lines
        return f"KeyPair(public_key={self.public_key_hex!r})"


class KeyInput(enum.Enum):
    """What kind of key material a derivation input is."""

    EMPTY = 0
    SEED = SEED_SIZE
    EXPANDED = SECRET_KEY_SIZE


def classify_key_material(data: Optional[bytes]) -> KeyInput:
    if data is None or len(data) == 0:
        return KeyInput.EMPTY
    if len(data) == SEED_SIZE:
        return KeyInput.SEED
    if len(data) == SECRET_KEY_SIZE:
        return KeyInput.EXPANDED
    raise InvalidKeyMaterial("expected 32-byte seed or 64-byte secret key")


def _keypair_from_signing_key(sk: SigningKey) -> KeyPair:
    seed = sk.encode(encoder=RawEncoder)
    public_key = sk.verify_key.encode(encoder=RawEncoder)
    return KeyPair(public_key=public_key, secret_key=seed + public_key)


def _from_fresh() -> KeyPair:
    return _keypair_from_signing_key(SigningKey.generate())


def _from_seed(seed: bytes) -> KeyPair:
    return _keypair_from_signing_key(SigningKey(seed))


def _from_expanded(secret_key: bytes, verify: bool) -> KeyPair:
    """Accept a 64-byte ``seed || public_key`` secret key.

    By default the trailing public key is trusted as given. With ``verify``
    set, it is recomputed from the seed half and must match.
    """
    public_key = secret_key[SEED_SIZE:]
    if verify and _from_seed(secret_key[:SEED_SIZE]).public_key != public_key:
        raise InvalidKeyMaterial("secret key does not match its public key")
    return KeyPair(public_key=public_key, secret_key=secret_key)


def derive(data: Optional[bytes] = None, verify_expanded: bool = False) -> KeyPair:
    """Derive or import a wallet keypair.

    Parameters
    ----------
    data : bytes, optional
        ``None`` or empty for a fresh keypair, a 32-byte seed, or a 64-byte
        secret key.
    verify_expanded : bool, optional
        Check that a 64-byte secret key's public half matches its seed half.
        Off by default, in which case any 64-byte value is accepted.

    Returns
    -------
    KeyPair
        32-byte public key and 64-byte secret key.

    Raises
    ------
    InvalidKeyMaterial
        If ``data`` has any other length, or fails the ``verify_expanded``
        check.
    """
    raw = bytes(data) if data is not None else None
    kind = classify_key_material(raw)
    if kind is KeyInput.EMPTY:
        kp = _from_fresh()
    elif kind is KeyInput.SEED:
        kp = _from_seed(raw)
    else:
        kp = _from_expanded(raw, verify_expanded)
    log.debug("Derived keypair (%s) for %s", kind.name.lower(), kp.address)
    return kp


def address_of(public_key: bytes) -> str:
    if len(public_key) != PUBLIC_KEY_SIZE:
        raise InvalidKeyMaterial(f"public key must be {PUBLIC_KEY_SIZE} bytes")
    return "0x" + encode_hex(public_key)


def sign(secret_key: bytes, message: bytes) -> bytes:
    """Detached Ed25519 signature of ``message``.

    The public half of ``secret_key`` enters the signature hash verbatim, so
    a secret key whose tail is not its real public key still signs, but the
    result will not verify.
    """
    if len(secret_key) != SECRET_KEY_SIZE:
        raise InvalidKeyMaterial(f"secret key must be {SECRET_KEY_SIZE} bytes")
    signed = crypto_sign(bytes(message), bytes(secret_key))
    return signed[:SIGNATURE_SIZE]


def verify(public_key: bytes, message: bytes, signature: bytes) -> bool:
    if len(public_key) != PUBLIC_KEY_SIZE:
        raise InvalidKeyMaterial(f"public key must be {PUBLIC_KEY_SIZE} bytes")
    if len(signature) != SIGNATURE_SIZE:
        return False
    try:
        VerifyKey(bytes(public_key)).verify(bytes(message), bytes(signature))
    except BadSignatureError:
        return False
    return True
