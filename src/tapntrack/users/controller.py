from __future__ import annotations

from flask import Flask, request, session

from ..auth.policy import require_admin
from ..auth.service import AdminCredentials
from ..common.coercion import as_enum, as_optional_str
from ..common.web import current_caller, id_list, json_body, json_ok, login_required
from ..core.enums import BulkAction, Role
from ..core.exceptions import ValidationError
from ..tracks.service import to_view
from ..container import Container
from .query import UserQuery


def _stats_to_dict(stats) -> dict:
    return {
        "totalAttendance": stats.total_attendance,
        "attendanceRate": stats.attendance_rate,
        "lastSeen": stats.last_seen,
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/api/users", methods=["GET"], endpoint="api_users")
    @login_required
    def list_users():
        users = container.user_service.list_users(current_caller(), UserQuery.from_args(request.args))
        return json_ok(users=[u.to_map() for u in users], count=len(users))

    @app.route("/api/users", methods=["POST"], endpoint="api_users_create")
    @login_required
    def create_user():
        caller = current_caller()
        require_admin(caller)
        data = json_body()
        role = as_enum(data.get("role"), Role, None)
        if role is None:
            raise ValidationError("Role must be TEACHER or STUDENT")
        user = container.account_service.create_account(
            admin=AdminCredentials(email=session.get("email", ""), password=str(data.get("adminPassword") or "")),
            email=str(data.get("email") or ""),
            password=str(data.get("password") or ""),
            name=str(data.get("name") or ""),
            role=role,
            teacher_id=as_optional_str(data.get("teacherId")),
        )
        return json_ok(201, user=user.to_map(), message="User created successfully")

    @app.route("/api/users/<uid>", methods=["GET"], endpoint="api_user_detail")
    @login_required
    def user_detail(uid: str):
        details = container.user_service.get_user_details(current_caller(), uid)
        return json_ok(
            user=details.user.to_map(),
            attendance=[to_view(t) for t in details.attendance],
            statistics=_stats_to_dict(details.statistics),
        )

    @app.route("/api/users/<uid>", methods=["PATCH"], endpoint="api_user_update")
    @login_required
    def update_user(uid: str):
        data = json_body()
        user = container.user_service.update_name(current_caller(), uid, str(data.get("name") or ""))
        return json_ok(user=user.to_map(), message="Profile updated")

    @app.route("/api/users/<uid>", methods=["DELETE"], endpoint="api_user_delete")
    @login_required
    def delete_user(uid: str):
        container.user_service.delete_user(current_caller(), uid)
        return json_ok(message="User deleted")

    @app.route("/api/users/<uid>/activate", methods=["POST"], endpoint="api_user_activate")
    @login_required
    def activate_user(uid: str):
        container.user_service.activate_user(current_caller(), uid)
        return json_ok(message="User activated")

    @app.route("/api/users/<uid>/deactivate", methods=["POST"], endpoint="api_user_deactivate")
    @login_required
    def deactivate_user(uid: str):
        container.user_service.deactivate_user(current_caller(), uid)
        return json_ok(message="User deactivated")

    @app.route("/api/users/bulk", methods=["POST"], endpoint="api_users_bulk")
    @login_required
    def bulk_users():
        data = json_body()
        action = as_enum(data.get("action"), BulkAction, None)
        if action is None:
            raise ValidationError("Action must be delete, activate or deactivate")
        result = container.user_service.bulk(current_caller(), action, id_list(data))
        return json_ok(result=result.to_dict())

    @app.route("/api/teachers", methods=["GET"], endpoint="api_teachers")
    @login_required
    def list_teachers():
        teachers = container.user_service.list_teachers()
        return json_ok(teachers=[{"uid": t.uid, "name": t.name, "email": t.email} for t in teachers])
