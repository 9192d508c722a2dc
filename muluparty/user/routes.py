"""JSON routes for users."""

from __future__ import annotations

from typing import Any

from muluparty.core.forms import form_error_message
from muluparty.core.responses import api_failure, api_success

from . import bp
from .forms import CreateUserForm
from .services import UserService


@bp.route("/", methods=["POST"])
def create_user() -> Any:
    """Create a user that belongs to no teams yet."""
    form = CreateUserForm()
    if not form.validate_on_submit():
        return api_failure(form_error_message(form))

    user_id, error = UserService.create_user(form.user_id.data or None)
    if user_id is None:
        return api_failure(error or "Unable to create the User.")
    return api_success("User created.", {"id": user_id}, 201)


@bp.route("/<string:user_id>", methods=["GET"])
def view_user(user_id: str) -> Any:
    user, error = UserService.get_user(user_id)
    if user is None:
        return api_failure(error or "User not found.", 404)
    return api_success("OK", {"id": user.id, "teamIds": list(user.associated_teams)})
