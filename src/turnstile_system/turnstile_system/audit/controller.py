from __future__ import annotations

import logging
import time
from datetime import datetime

from flask import Flask, g, jsonify, request, session

from ..common.web import admin_required, current_role
from ..container import Container
from .model import AccessLogEntry

logger = logging.getLogger(__name__)


def _fmt(value) -> str | None:
    return value.strftime("%Y-%m-%d %H:%M:%S") if value else None


def log_to_json(e: AccessLogEntry) -> dict:
    return {
        "id": e.log_id,
        "user_id": e.user_id,
        "username": e.username,
        "path": e.path,
        "method": e.method,
        "status": e.status_code,
        "started_at": _fmt(e.started_at),
        "finished_at": _fmt(e.finished_at),
        "duration_ms": e.duration_ms,
        "ip": e.ip,
        "user_agent": e.user_agent,
    }


def register(app: Flask, container: Container) -> None:
    service = container.access_log_service

    @app.before_request
    def start_access_log():
        if service.should_log(request.path):
            g.access_started_at = datetime.now()
            g.access_started = time.perf_counter()
            g.access_user = (session.get("user_id"), session.get("username"))

    @app.after_request
    def write_access_log(response):
        started_at = g.pop("access_started_at", None)
        started = g.pop("access_started", None)
        before_id, before_name = g.pop("access_user", (None, None))
        if started_at is None:
            return response

        # read the session after the view so a login is attributed to the new user; logout keeps the old one
        entry = AccessLogEntry(
            path=request.full_path.rstrip("?"),
            method=request.method,
            started_at=started_at,
            finished_at=datetime.now(),
            duration_ms=int((time.perf_counter() - started) * 1000),
            status_code=response.status_code,
            user_id=session.get("user_id", before_id),
            username=session.get("username", before_name),
            ip=request.remote_addr,
            user_agent=request.headers.get("User-Agent"),
        )
        try:
            service.record(entry)
        except Exception:
            logger.exception("Failed to write access log for %s %s", entry.method, entry.path)
        return response

    @app.route("/api/admin/access-logs", methods=["GET"], endpoint="admin_access_logs")
    @admin_required
    def admin_access_logs():
        logs = service.list_recent(current_role=current_role(), limit=request.args.get("limit"))
        return jsonify({"success": True, "total": len(logs), "logs": [log_to_json(e) for e in logs]})
