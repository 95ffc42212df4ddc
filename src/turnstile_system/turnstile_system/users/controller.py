from __future__ import annotations

from datetime import timedelta

from flask import Flask, jsonify, request, session

from ..common.web import admin_required, current_role, login_required
from ..core.enums import Role
from ..core.exceptions import ValidationError
from ..container import Container
from .model import User


def _parse_role(value) -> Role | None:
    if value is None:
        return None
    try:
        return Role(str(value).strip().lower())
    except ValueError:
        raise ValidationError("Papel inválido") from None


def _fmt(value) -> str | None:
    return value.strftime("%Y-%m-%d %H:%M:%S") if value else None


def user_to_json(u: User) -> dict:
    return {
        "id": u.user_id,
        "username": u.username,
        "role": u.role.value,
        "active": u.is_active,
        "created_at": _fmt(u.created_at),
        "last_login": _fmt(u.last_login),
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/api/auth/login", methods=["POST"], endpoint="login")
    def login():
        data = request.get_json(silent=True) or request.form
        s_user = container.auth_service.authenticate(data.get("username", ""), data.get("password", ""))

        session.clear()
        session.permanent = True
        app.permanent_session_lifetime = timedelta(hours=10)
        session["user_id"] = s_user.user_id
        session["username"] = s_user.username
        session["role"] = s_user.role.value

        return jsonify(
            {
                "success": True,
                "user": {"id": s_user.user_id, "username": s_user.username, "role": s_user.role.value},
            }
        )

    @app.route("/api/auth/logout", methods=["POST"], endpoint="logout")
    @login_required
    def logout():
        session.clear()
        return jsonify({"success": True, "message": "Logout efetuado"})

    @app.route("/api/auth/me", methods=["GET"], endpoint="me")
    @login_required
    def me():
        return jsonify(
            {
                "success": True,
                "user": {"id": session["user_id"], "username": session.get("username"), "role": session.get("role")},
            }
        )

    @app.route("/api/admin/users", methods=["POST"], endpoint="admin_create_user")
    @admin_required
    def admin_create_user():
        data = request.get_json(silent=True) or {}
        user_id = container.user_service.create_user(
            current_role=current_role(),
            username=data.get("username", ""),
            password=data.get("password", ""),
            role=_parse_role(data.get("role")) or Role.USER,
        )
        return jsonify({"success": True, "user_id": user_id}), 201

    @app.route("/api/admin/users/<int:user_id>", methods=["PATCH"], endpoint="admin_update_user")
    @admin_required
    def admin_update_user(user_id: int):
        data = request.get_json(silent=True) or {}
        active = data.get("active")
        container.user_service.update_user(
            current_role=current_role(),
            user_id=user_id,
            role=_parse_role(data.get("role")),
            is_active=bool(active) if active is not None else None,
        )
        return jsonify({"success": True})

    @app.route("/api/admin/users", methods=["GET"], endpoint="admin_list_users")
    @admin_required
    def admin_list_users():
        users = container.user_service.list_users(current_role=current_role())
        return jsonify({"success": True, "total": len(users), "users": [user_to_json(u) for u in users]})

    @app.route("/api/admin/users/<int:user_id>", methods=["DELETE"], endpoint="admin_delete_user")
    @admin_required
    def admin_delete_user(user_id: int):
        deleted = container.user_service.delete_user(
            current_role=current_role(),
            current_user_id=session["user_id"],
            user_id=user_id,
        )
        return jsonify(
            {
                "success": True,
                "message": "Usuário deletado com sucesso",
                "deleted_user": {"id": deleted.user_id, "username": deleted.username},
            }
        )
