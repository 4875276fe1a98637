from __future__ import annotations

import logging
import secrets
from typing import Optional, Tuple

from .config import Settings
from .errors import AuthorizationError, ValidationError
from .models import PasteRecord

log = logging.getLogger("pastebin.keys")

KEY_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"
# Paths served by fixed routes; a paste stored there could never be read back.
RESERVED_KEYS = frozenset({"health"})


class KeyManager:
    """
    Issues paste keys and guards deletes.

    Generated keys are not checked for collisions: a clash overwrites the
    existing paste, the same as an explicit key chosen by the caller.
    """

    def __init__(self, settings: Settings) -> None:
        self.key_length = settings.KEY_LENGTH

    def generate_key(self) -> str:
        while True:
            key = "".join(secrets.choice(KEY_ALPHABET) for _ in range(self.key_length))
            if key not in RESERVED_KEYS:
                return key

    def resolve_key(self, explicit_key: Optional[str]) -> str:
        if not explicit_key:
            return self.generate_key()
        if explicit_key in RESERVED_KEYS:
            raise ValidationError(f"Key '{explicit_key}' is reserved")
        return explicit_key

    @staticmethod
    def split_key(raw_key: str) -> Tuple[str, Optional[str]]:
        """Split ``key.ext`` on the first dot; an empty extension counts as none."""
        key, sep, extension = raw_key.partition(".")
        return key, (extension if sep and extension else None)

    @staticmethod
    def authorize_delete(record: PasteRecord, client_ip: Optional[str]) -> None:
        owner = record.creator_ip
        if owner is None or client_ip is None or owner != client_ip:
            log.warning("Rejected delete of %s from %s", record.key, client_ip)
            raise AuthorizationError()
