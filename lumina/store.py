# Wallet persistence
"""
Key/value persistence for wallet records.

The wallet core never touches storage on its own. Callers hand a
:class:`KeyValueStore` to :class:`WalletStore`, which writes one JSON
record per wallet::

    {"publicKeyHex": "<64 hex chars>", "secretKeyHex": "<128 hex chars>"}

Two stores ship with the package: :class:`MemoryStore` for tests and
embedding, and :class:`JsonFileStore`, which keeps every key in a single
JSON file that is rewritten atomically under a lock file.
"""

import json
import logging
import os
import threading
import time
from contextlib import contextmanager
from typing import Dict, Optional, Protocol

from .encoding import decode_hex
from .errors import StorageUnavailable
from .keys import KeyPair

log = logging.getLogger(__name__)

WALLET_KEY = "lumina_wallet_v1"


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class MemoryStore:
    """Dict-backed store."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)


# ---------------------
# Atomic write / file lock
# ---------------------
def atomic_write_bytes(path: str, data: bytes, mode: int = 0o600):
    # owner-only; no temp file survives a failed write
    tmp = f"{path}.tmp.{os.getpid()}.{threading.get_ident()}"
    fd = os.open(tmp, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, mode)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp, path)
    except BaseException:
        if os.path.exists(tmp):
            os.remove(tmp)
        raise


@contextmanager
def file_lock(lockpath: str, timeout: float = 10.0):
    """
    Cross-platform advisory lock held on ``lockpath`` for the duration of the block.
    """
    start = time.time()
    f = open(lockpath, "a+b")
    try:
        if os.name == "nt":
            import msvcrt
            while True:
                try:
                    f.seek(0)
                    msvcrt.locking(f.fileno(), msvcrt.LK_NBLCK, 1)
                    break
                except OSError:
                    if (time.time() - start) > timeout:
                        raise TimeoutError("Timeout acquiring lock")
                    time.sleep(0.05)
        else:
            import fcntl
            while True:
                try:
                    fcntl.flock(f, fcntl.LOCK_EX | fcntl.LOCK_NB)
                    break
                except OSError:
                    if (time.time() - start) > timeout:
                        raise TimeoutError("Timeout acquiring lock")
                    time.sleep(0.05)
        try:
            yield
        finally:
            if os.name == "nt":
                import msvcrt
                f.seek(0)
                msvcrt.locking(f.fileno(), msvcrt.LK_UNLCK, 1)
            else:
                import fcntl
                fcntl.flock(f, fcntl.LOCK_UN)
    finally:
        f.close()


class JsonFileStore:
    """All keys in one JSON object on disk.

    Reads take no lock; writes hold ``<path>.lock`` while they read, modify
    and atomically replace the file. ``OSError`` and ``TimeoutError`` from
    the filesystem surface as :class:`StorageUnavailable`.
    """

    def __init__(self, path: str):
        self.path = path
        self.lockpath = f"{path}.lock"

    def _load(self) -> Dict[str, str]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as fh:
                obj = json.load(fh)
        except OSError as e:
            raise StorageUnavailable(f"cannot read {self.path}: {e}") from e
        except (json.JSONDecodeError, UnicodeDecodeError):
            log.warning("Store file %s is not valid JSON; treating as empty", self.path)
            return {}
        if not isinstance(obj, dict):
            log.warning("Store file %s does not hold an object; treating as empty", self.path)
            return {}
        return {str(k): v for k, v in obj.items() if isinstance(v, str)}

    @contextmanager
    def _locked(self):
        try:
            parent = os.path.dirname(os.path.abspath(self.path))
            os.makedirs(parent, exist_ok=True)
            with file_lock(self.lockpath):
                yield
        except (OSError, TimeoutError) as e:
            raise StorageUnavailable(f"cannot write {self.path}: {e}") from e

    def _write(self, data: Dict[str, str]):
        atomic_write_bytes(self.path, json.dumps(data, indent=2).encode("utf-8"))

    def get(self, key: str) -> Optional[str]:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        with self._locked():
            data = self._load()
            data[key] = value
            self._write(data)

    def remove(self, key: str) -> None:
        with self._locked():
            data = self._load()
            if data.pop(key, None) is not None:
                self._write(data)


class WalletStore:
    """Persist one wallet keypair as a hex record in a key/value store.

    With ``store=None`` there is nowhere to persist: writes do nothing and
    reads find nothing.
    """

    def __init__(self, store: Optional[KeyValueStore], key: str = WALLET_KEY):
        self.store = store
        self.key = key

    def store_wallet(self, keypair: Optional[KeyPair]) -> None:
        if self.store is None:
            log.debug("No store configured; wallet not persisted")
            return
        if keypair is None:
            self.clear()
            return
        record = {
            "publicKeyHex": keypair.public_key_hex,
            "secretKeyHex": keypair.secret_key_hex,
        }
        self.store.set(self.key, json.dumps(record))
        log.info("Stored wallet 0x%s", keypair.public_key_hex)

    def retrieve_wallet(self) -> Optional[KeyPair]:
        if self.store is None:
            return None
        try:
            raw = self.store.get(self.key)
        except StorageUnavailable:
            log.exception("Failed to read wallet record")
            return None
        if not raw:
            return None
        try:
            parsed = json.loads(raw)
            return KeyPair(
                public_key=decode_hex(parsed["publicKeyHex"]),
                secret_key=decode_hex(parsed["secretKeyHex"]),
            )
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            log.warning("Discarding unreadable wallet record: %s", e)
            return None

    def clear(self) -> None:
        if self.store is None:
            return
        self.store.remove(self.key)
        log.info("Removed wallet record")
