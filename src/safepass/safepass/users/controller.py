from __future__ import annotations

from flask import Flask, session

from ..common.web import admin_required, approved_required, current_user, login_required, ok, payload, store_user
from ..container import Container
from ..users.service import SessionUser


def register(app: Flask, container: Container) -> None:
    @app.route("/api/auth/login", methods=["POST"], endpoint="login")
    def login():
        data = payload()
        s_user = container.auth_service.login(data.get("email", ""), data.get("password", ""))
        store_user(s_user)
        session.permanent = bool(data.get("remember_me"))
        return ok(user=s_user.to_session(), approved=s_user.is_approved)

    @app.route("/api/auth/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return ok(message="Signed out")

    @app.route("/api/auth/signup", methods=["POST"], endpoint="signup")
    def signup():
        user = container.auth_service.sign_up(payload())
        return ok(user=user.to_public(), message="Account created. An admin must approve it before you can sign in."), 201

    @app.route("/api/auth/me", endpoint="me")
    @login_required
    def me():
        s_user = container.auth_service.reload(current_user())
        store_user(s_user)
        return ok(user=s_user.to_session(), approved=s_user.is_approved)

    @app.route("/api/profile", methods=["PUT"], endpoint="update_profile")
    @approved_required
    def update_profile():
        user = container.user_service.update_profile(current=current_user(), form=payload())
        store_user(SessionUser.from_user(user))
        return ok(user=user.to_public(), message="Profile updated")

    @app.route("/api/profile/password", methods=["POST"], endpoint="change_password")
    @approved_required
    def change_password():
        data = payload()
        container.user_service.change_password(
            current=current_user(),
            current_password=data.get("current_password", ""),
            new_password=data.get("new_password", ""),
            confirm_password=data.get("confirm_password", ""),
        )
        return ok(message="Password changed")

    @app.route("/api/users", endpoint="list_users")
    @admin_required
    def list_users():
        users = container.user_service.list_users(current=current_user())
        return ok(users=[u.to_public() for u in users])

    @app.route("/api/users", methods=["POST"], endpoint="create_user")
    @admin_required
    def create_user():
        user = container.user_service.create_user(current=current_user(), form=payload())
        return ok(user=user.to_public()), 201

    @app.route("/api/users/<user_id>/role", methods=["PUT"], endpoint="change_role")
    @admin_required
    def change_role(user_id: str):
        user = container.user_service.change_role(current=current_user(), user_id=user_id, role=payload().get("role", ""))
        return ok(user=user.to_public())

    @app.route("/api/users/<user_id>/approve", methods=["POST"], endpoint="approve_user")
    @admin_required
    def approve_user(user_id: str):
        user = container.user_service.approve(current=current_user(), user_id=user_id)
        return ok(user=user.to_public())

    @app.route("/api/users/<user_id>/suspend", methods=["POST"], endpoint="suspend_user")
    @admin_required
    def suspend_user(user_id: str):
        user = container.user_service.suspend(current=current_user(), user_id=user_id)
        return ok(user=user.to_public())

    @app.route("/api/users/<user_id>", methods=["DELETE"], endpoint="delete_user")
    @admin_required
    def delete_user(user_id: str):
        container.user_service.delete_user(current=current_user(), user_id=user_id)
        return ok(message="User deleted")
