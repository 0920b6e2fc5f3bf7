"""
Lumina wallet key core: Ed25519 keypairs, hex codec and wallet persistence.
"""
from .encoding import decode_hex, encode_hex, from_int_list, normalize_hex, to_int_list
from .errors import (
    InvalidEncoding,
    InvalidKeyMaterial,
    LuminaError,
    NotConnected,
    StorageUnavailable,
)
from .keys import KeyInput, KeyPair, address_of, classify_key_material, derive, sign, verify
from .session import (
    Session,
    create_wallet,
    get_session,
    import_wallet,
    logout,
    require_session,
    wallet_login,
)
from .store import JsonFileStore, KeyValueStore, MemoryStore, WalletStore

__version__ = "1.0.0"
__all__ = [
    "KeyPair",
    "KeyInput",
    "classify_key_material",
    "derive",
    "sign",
    "verify",
    "address_of",
    "encode_hex",
    "decode_hex",
    "normalize_hex",
    "to_int_list",
    "from_int_list",
    "KeyValueStore",
    "MemoryStore",
    "JsonFileStore",
    "WalletStore",
    "Session",
    "wallet_login",
    "get_session",
    "require_session",
    "logout",
    "create_wallet",
    "import_wallet",
    "LuminaError",
    "InvalidKeyMaterial",
    "InvalidEncoding",
    "StorageUnavailable",
    "NotConnected",
]
