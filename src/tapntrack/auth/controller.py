from __future__ import annotations

from flask import Flask, session

from ..common.web import current_caller, json_body, json_ok, login_required
from ..core.exceptions import AuthenticationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/auth/login", methods=["POST"], endpoint="api_login")
    def login():
        data = json_body()
        user = container.auth_service.login(str(data.get("email") or ""), str(data.get("password") or ""))
        session.clear()
        session["uid"] = user.uid
        session["role"] = user.role.value
        session["email"] = user.email
        session["name"] = user.name
        return json_ok(user=user.to_dict(), message="Login successful")

    @app.route("/api/auth/logout", methods=["POST"], endpoint="api_logout")
    def logout():
        container.auth_service.logout()
        session.clear()
        return json_ok(message="Logged out")

    @app.route("/api/auth/me", methods=["GET"], endpoint="api_me")
    @login_required
    def me():
        caller = current_caller()
        user = container.user_service.get_user(caller, caller.uid)
        return json_ok(user=user.to_map())

    @app.route("/api/auth/password-reset", methods=["POST"], endpoint="api_password_reset")
    def password_reset():
        data = json_body()
        container.auth_service.send_password_reset(str(data.get("email") or ""))
        return json_ok(message="Password reset email sent. Please check your inbox.")

    @app.route("/api/auth/password-reset/confirm", methods=["POST"], endpoint="api_password_reset_confirm")
    def password_reset_confirm():
        data = json_body()
        container.auth_service.confirm_password_reset(
            str(data.get("token") or ""), str(data.get("newPassword") or "")
        )
        return json_ok(message="Password has been reset")

    @app.route("/api/auth/change-password", methods=["POST"], endpoint="api_change_password")
    @login_required
    def change_password():
        data = json_body()
        email = session.get("email")
        if not email:
            raise AuthenticationError("Please sign in to continue")
        container.auth_service.change_password(
            email=email,
            current_password=str(data.get("currentPassword") or ""),
            new_password=str(data.get("newPassword") or ""),
            confirm_password=str(data.get("confirmPassword") or ""),
        )
        return json_ok(message="Password updated successfully")
