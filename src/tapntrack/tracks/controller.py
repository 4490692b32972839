from __future__ import annotations

from dataclasses import replace

from flask import Flask, request

from ..common.web import current_caller, id_list, json_body, json_ok, login_required
from ..container import Container
from .query import LogQuery, LogSummary
from .service import to_view

_PERIODS = {"today", "week", "month"}


def summary_to_dict(summary: LogSummary) -> dict:
    return {
        "present": summary.present,
        "late": summary.late,
        "absent": summary.absent,
        "halfDay": summary.half_day,
    }


def register(app: Flask, container: Container) -> None:
    service = container.log_service

    def _query_from_request() -> LogQuery:
        period = (request.args.get("period") or "").lower()
        if period not in _PERIODS:
            return LogQuery.from_args(request.args)
        preset = {"today": service.today_query, "week": service.week_query, "month": service.month_query}[period]()
        # Date window from the preset, everything else from the query string.
        return replace(
            LogQuery.from_args(request.args),
            date=preset.date,
            start_date=preset.start_date,
            end_date=preset.end_date,
        )

    @app.route("/api/logs", methods=["GET"], endpoint="api_logs")
    @login_required
    def list_logs():
        view = service.list_logs(current_caller(), _query_from_request())
        return json_ok(
            logs=[to_view(t) for t in view.logs],
            count=len(view.logs),
            summary=summary_to_dict(view.summary),
        )

    @app.route("/api/logs/<track_id>", methods=["GET"], endpoint="api_log_detail")
    @login_required
    def log_detail(track_id: str):
        return json_ok(log=to_view(service.get_log(current_caller(), track_id)))

    @app.route("/api/logs/<track_id>", methods=["PATCH"], endpoint="api_log_update")
    @login_required
    def update_log(track_id: str):
        track = service.update_log(current_caller(), track_id, json_body())
        return json_ok(log=to_view(track), message="Log updated")

    @app.route("/api/logs/<track_id>", methods=["DELETE"], endpoint="api_log_delete")
    @login_required
    def delete_log(track_id: str):
        service.delete_log(current_caller(), track_id)
        return json_ok(message="Log deleted")

    @app.route("/api/logs/bulk-delete", methods=["POST"], endpoint="api_logs_bulk_delete")
    @login_required
    def bulk_delete_logs():
        result = service.bulk_delete(current_caller(), id_list(json_body()))
        return json_ok(result=result.to_dict())
