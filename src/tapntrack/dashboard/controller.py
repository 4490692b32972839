from __future__ import annotations

from flask import Flask

from ..common.web import current_caller, json_ok, login_required
from ..container import Container
from ..tracks.service import to_view


def register(app: Flask, container: Container) -> None:
    @app.route("/api/dashboard", methods=["GET"], endpoint="api_dashboard")
    @login_required
    def dashboard():
        data = container.dashboard_service.load(current_caller())
        return json_ok(
            currentDateTime=data.current_date_time,
            today={
                "present": data.today.present,
                "late": data.today.late,
                "absent": data.today.absent,
                "totalStudents": data.today.total_students,
            },
            quickStats={
                "totalStudents": data.quick_stats.total_students,
                "totalTeachers": data.quick_stats.total_teachers,
                "logsThisWeek": data.quick_stats.logs_this_week,
            },
            recentActivity=[to_view(t) for t in data.recent_activity],
        )
