"""AuthProvider backed by the record store.

Passwords are kept as werkzeug hashes in the `credentials` collection, keyed by
uid. Password reset tokens live in `password_resets`, keyed by a hash of the
token, and can be redeemed once before they expire.
"""

from __future__ import annotations

import hashlib
import logging
import secrets
import threading
from typing import Callable, Optional
from uuid import uuid4

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.datetime_utils import now_ms
from ..core.constants import CREDENTIALS, PASSWORD_RESET_TTL_MINUTES, PASSWORD_RESETS
from ..core.exceptions import AccountExistsError, AuthenticationError
from ..database.store import Document, RecordStore

logger = logging.getLogger(__name__)

TokenSink = Callable[[str, str], None]


def _token_key(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


class StoreAuthProvider:
    def __init__(self, store: RecordStore, *, token_sink: Optional[TokenSink] = None):
        self._store = store
        # Delivery of reset tokens (mail etc.) is left to the sink.
        self._token_sink = token_sink
        self._lock = threading.Lock()
        self._uid: Optional[str] = None

    def _find(self, email: str) -> Optional[Document]:
        matches = self._store.query_by_field(CREDENTIALS, "email", email.strip().lower())
        return matches[0] if matches else None

    def _verify(self, email: str, password: str) -> Document:
        cred = self._find(email)
        if not cred or not check_password_hash(cred.get("passwordHash", ""), password):
            raise AuthenticationError("Invalid email or password")
        return cred

    def _switch(self, uid: Optional[str]) -> None:
        with self._lock:
            self._uid = uid

    def create_account(self, email: str, password: str) -> str:
        email = email.strip().lower()
        if self._find(email):
            raise AccountExistsError("The email address is already in use by another account.")
        uid = uuid4().hex
        self._store.set(
            CREDENTIALS,
            uid,
            {"uid": uid, "email": email, "passwordHash": generate_password_hash(password), "createdAt": now_ms()},
        )
        self._switch(uid)
        logger.info("Created credentials for %s", uid)
        return uid

    def sign_in(self, email: str, password: str) -> str:
        cred = self._verify(email, password)
        self._switch(cred["uid"])
        return cred["uid"]

    def reauthenticate(self, email: str, password: str) -> str:
        # Several web sessions share this provider; the current session is left alone.
        return self._verify(email, password)["uid"]

    def update_password(self, uid: str, new_password: str) -> None:
        self._store.update_fields(CREDENTIALS, uid, {"passwordHash": generate_password_hash(new_password)})
        logger.info("Password changed for %s", uid)

    def send_password_reset(self, email: str) -> None:
        cred = self._find(email)
        if not cred:
            raise AuthenticationError("Email not found. Please check and try again.")
        token = secrets.token_urlsafe(32)
        expires_at = now_ms() + PASSWORD_RESET_TTL_MINUTES * 60_000
        self._store.set(PASSWORD_RESETS, _token_key(token), {"uid": cred["uid"], "expiresAt": expires_at})
        logger.info("Password reset issued for %s", cred["uid"])
        if self._token_sink is not None:
            self._token_sink(cred["email"], token)

    def confirm_password_reset(self, token: str, new_password: str) -> None:
        key = _token_key(token or "")
        entry = self._store.get(PASSWORD_RESETS, key)
        if not entry or entry.get("expiresAt", 0) < now_ms():
            raise AuthenticationError("This reset link is invalid or has expired")
        self._store.remove(PASSWORD_RESETS, key)
        self._store.update_fields(CREDENTIALS, entry["uid"], {"passwordHash": generate_password_hash(new_password)})

    def sign_out(self) -> None:
        self._switch(None)

    def current_uid(self) -> Optional[str]:
        return self._uid
