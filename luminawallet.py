#!/usr/bin/env python3
"""
Command-line front end for the Lumina wallet key core.

Creates or imports a single Ed25519 wallet, keeps it (and the login
session) in a JSON file store, and signs or verifies messages with it.
"""
import os
import sys
import logging
import argparse
import importlib.util
from datetime import datetime, timezone
from typing import Dict, List, Optional

import pwinput
from rich.console import Console
from rich.table import Table

from lumina import (
    JsonFileStore,
    LuminaError,
    NotConnected,
    WalletStore,
    create_wallet,
    decode_hex,
    encode_hex,
    get_session,
    import_wallet,
    logout,
    require_session,
    sign,
    verify,
)

console = Console()


def print(x):
    console.print(x, soft_wrap=True)


# ---------------------
# Settings (defaults, but may be overridden by optional config/settings.py)
# ---------------------
_INTERNAL_DEFAULTS = {
    "DEFAULT_APP_DIR": ".lumina",
    "DEFAULT_STORE_FILE": "store.json",
    "DEFAULT_STRICT_IMPORT": False,
    "DEFAULT_LOG_LEVEL": "INFO",
}


def load_settings(cfg_dir: str = "config") -> Dict[str, object]:
    """Resolve settings: config/settings.py over internal defaults.

    A missing settings.py is regenerated from the internal defaults so there
    is always a file to edit. CLI args still take precedence over both.
    """
    path = os.path.join(cfg_dir, "settings.py")
    if not os.path.exists(path):
        try:
            os.makedirs(cfg_dir, exist_ok=True)
            with open(path, "w", encoding="utf-8") as sf:
                sf.write("# Regenerated settings.py - values derived from internal defaults\n")
                for k, v in _INTERNAL_DEFAULTS.items():
                    sf.write(f"{k} = {repr(v)}\n")
        except OSError:
            logging.debug("Could not regenerate %s", path, exc_info=True)
            return dict(_INTERNAL_DEFAULTS)

    settings = dict(_INTERNAL_DEFAULTS)
    try:
        spec = importlib.util.spec_from_file_location("_lumina_user_settings", path)
        mod = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(mod)
    except Exception:
        logging.exception("Failed to load %s; using internal defaults", path)
        return settings
    settings.update({k: getattr(mod, k) for k in dir(mod) if k.isupper()})
    return settings


_LOG_HANDLER: Optional[logging.Handler] = None


def setup_logging(app_dir: str, level: str):
    """Send log records to <app_dir>/lumina.log, replacing any earlier log file handler."""
    global _LOG_HANDLER
    os.makedirs(app_dir, exist_ok=True)
    root = logging.getLogger()
    if _LOG_HANDLER is not None:
        root.removeHandler(_LOG_HANDLER)
        _LOG_HANDLER.close()
    _LOG_HANDLER = logging.FileHandler(os.path.join(app_dir, "lumina.log"), encoding="utf-8")
    _LOG_HANDLER.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(message)s"))
    root.addHandler(_LOG_HANDLER)
    root.setLevel(getattr(logging, str(level).upper(), logging.INFO))


# ---------------------
# Commands
# ---------------------
def show_wallet(store, reveal: bool = False):
    session = require_session(store)
    created = datetime.fromtimestamp(session.created_at / 1000, tz=timezone.utc)
    table = Table(title="Lumina wallet")
    table.add_column("Field")
    table.add_column("Value", overflow="fold")
    table.add_row("Address", session.address)
    table.add_row("Public key", session.public_key)
    table.add_row("Logged in", created.isoformat())
    if reveal:
        kp = WalletStore(store).retrieve_wallet()
        table.add_row("Secret key", kp.secret_key_hex if kp else "[red]missing[/red]")
    print(table)


def sign_message(store, message: str) -> str:
    kp = WalletStore(store).retrieve_wallet()
    if kp is None:
        raise NotConnected("Wallet not connected")
    sig = sign(kp.secret_key, message.encode("utf-8"))
    logging.info("Signed %d-byte message with %s", len(message.encode("utf-8")), kp.address)
    return encode_hex(sig)


def verify_message(store, message: str, signature_hex: str, pubkey_hex: Optional[str] = None) -> bool:
    if pubkey_hex:
        public_key = decode_hex(pubkey_hex)
    else:
        public_key = decode_hex(require_session(store).public_key)
    return verify(public_key, message.encode("utf-8"), decode_hex(signature_hex))


# ---------------------
# Main
# ---------------------
def build_parser(settings: Dict[str, object]) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lumina-wallet",
        description="Lumina wallet: create or import an Ed25519 wallet, then sign and verify messages.",
        epilog="Defaults may be configured in config/settings.py. CLI args override settings.py."
    )
    action = parser.add_mutually_exclusive_group(required=True)
    action.add_argument("--new", action="store_true", help="Create a fresh wallet and log in.")
    action.add_argument("--import", dest="import_hex", nargs="?", const=True,
                        help="Import a 32-byte seed or 64-byte secret key (hex). Prompts when no value is given.")
    action.add_argument("--show", action="store_true", help="Show the logged-in wallet.")
    action.add_argument("--sign", metavar="MESSAGE", help="Sign MESSAGE (UTF-8) with the stored wallet.")
    action.add_argument("--verify", nargs=2, metavar=("MESSAGE", "SIGNATURE"),
                        help="Verify a hex SIGNATURE over MESSAGE.")
    action.add_argument("--logout", action="store_true", help="Remove the session and the stored wallet.")
    parser.add_argument("--pubkey", help="Public key (hex) for --verify. Defaults to the logged-in wallet.")
    parser.add_argument("--reveal", action="store_true", help="Include the secret key in --show output.")
    parser.add_argument("--store", default=None,
                        help="Path to the JSON store file. Default: <DEFAULT_APP_DIR>/<DEFAULT_STORE_FILE>.")
    parser.add_argument("--strict", action="store_true", default=bool(settings.get("DEFAULT_STRICT_IMPORT")),
                        help="Reject 64-byte secret keys whose public half does not match their seed half.")
    parser.add_argument("--verbose", action="store_true", help="Verbose logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    settings = load_settings()
    parser = build_parser(settings)
    args = parser.parse_args(argv)
    if args.pubkey and not args.verify:
        parser.error("--pubkey only applies to --verify")
    if args.reveal and not args.show:
        parser.error("--reveal only applies to --show")

    app_dir = str(settings.get("DEFAULT_APP_DIR") or ".lumina")
    setup_logging(app_dir, "DEBUG" if args.verbose else str(settings.get("DEFAULT_LOG_LEVEL") or "INFO"))
    store_path = args.store or os.path.join(app_dir, str(settings.get("DEFAULT_STORE_FILE") or "store.json"))
    store = JsonFileStore(store_path)

    try:
        if args.new:
            kp, session = create_wallet(store)
            print(f"[green]✓ Created wallet[/green] {session.address}")
        elif args.import_hex is not None:
            text = args.import_hex
            if text is True:
                text = pwinput.pwinput("Paste secret key (hex): ", mask="*")
            kp, session = import_wallet(store, text, verify_expanded=args.strict)
            print(f"[green]✓ Imported wallet[/green] {session.address}")
        elif args.show:
            show_wallet(store, reveal=args.reveal)
        elif args.sign is not None:
            print(sign_message(store, args.sign))
        elif args.verify:
            message, signature_hex = args.verify
            if not verify_message(store, message, signature_hex, args.pubkey):
                print("[red]✗ Signature is NOT valid[/red]")
                return 1
            print("[green]✓ Signature is valid[/green]")
        elif args.logout:
            had_session = get_session(store) is not None
            logout(store)
            if had_session:
                print("[green]✓ Logged out[/green]")
            else:
                print("[yellow]No wallet session.[/yellow]")
    except LuminaError as e:
        logging.warning("Command failed: %s", e)
        print(f"[red]✗ {e}[/red]")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
