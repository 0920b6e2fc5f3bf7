# lumina/errors.py
"""Exceptions raised by the wallet key core."""


class LuminaError(Exception):
    """Base class for every error the wallet core raises."""


class InvalidKeyMaterial(LuminaError, ValueError):
    """Key bytes have the wrong length or do not belong together."""


class InvalidEncoding(LuminaError, ValueError):
    """A hex string is malformed (odd length or a non-hex character)."""


class StorageUnavailable(LuminaError, RuntimeError):
    """The backing key/value store cannot be read or written."""


class NotConnected(LuminaError):
    """No wallet session is active."""
