from __future__ import annotations

from typing import Optional, Protocol


class AuthProvider(Protocol):
    """Credential store and sign-in session.

    Bad credentials raise AuthenticationError, a taken email raises
    AccountExistsError and anything else raises StoreError.
    `create_account` signs the new account in, replacing the current session.
    `reauthenticate` returns the verified uid without touching the session, and
    `update_password` takes that uid explicitly.
    """

    def create_account(self, email: str, password: str) -> str:
        raise NotImplementedError

    def sign_in(self, email: str, password: str) -> str:
        raise NotImplementedError

    def send_password_reset(self, email: str) -> None:
        raise NotImplementedError

    def confirm_password_reset(self, token: str, new_password: str) -> None:
        raise NotImplementedError

    def reauthenticate(self, email: str, password: str) -> str:
        raise NotImplementedError

    def update_password(self, uid: str, new_password: str) -> None:
        raise NotImplementedError

    def sign_out(self) -> None:
        raise NotImplementedError

    def current_uid(self) -> Optional[str]:
        raise NotImplementedError
