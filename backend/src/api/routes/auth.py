"""
Jersey Catalog API - Session Endpoints
Login, registration, current user, logout and account unsubscribe.

Public:
    POST  /public/login
    POST  /public/register
Private:
    GET   /private/me
    POST  /private/logout
    PATCH /private/users/me/unsubscribe
"""

from flask import Blueprint, request, session

from api.middleware.auth import (
    SESSION_ACTIVITY_KEY, current_actor, end_session, login_required, start_session,
)
from api.responses import envelope, error_response, hide_fields
from api.routes.resource import json_body
from api.routes.users import USER_HIDDEN_FIELDS
from api.validation import ValidationError, is_blank, validate_payload, validate_registration
from database.connection import get_db_connection
from database.repositories.user_repository import UserRepository
from database.schema import get_introspector, tables
from models.actor import ActorContext, ROLE_CLIENT
from utils.logger import log_auth_event

public_auth_bp = Blueprint('public_auth', __name__)
private_auth_bp = Blueprint('private_auth', __name__)

# Never stored in (or returned from) the session record
SESSION_HIDDEN_FIELDS = ("password", "registered_at")

# Internal identifiers omitted from login and /me responses
PROFILE_HIDDEN_FIELDS = SESSION_HIDDEN_FIELDS + ("id", "role_id", "active")


@public_auth_bp.route('/login', methods=['POST'])
def login():
    """
    Start a session.

    Response:
        200 OK: Profile of the logged-in user
        401: Wrong email or password
        403: Account inactive
        422: Email or password missing
    """
    data = json_body()
    email = data.get("email")
    password = data.get("password")
    if is_blank(email) or is_blank(password):
        raise ValidationError({
            field: f"The field {field} is required."
            for field in ("email", "password")
            if is_blank(data.get(field))
        }, message="Email and password are required")

    with get_db_connection() as conn:
        user = UserRepository(conn).verify_credentials(email, password)

    if user is None:
        return error_response(401, "Incorrect credentials")

    if str(user.get("active")) != "1":
        log_auth_event("login_inactive", user_id=user.get("id"), email=email)
        return error_response(403, "Inactive user, contact the administrator")

    start_session(ActorContext.from_user(user))
    log_auth_event("login", user_id=user.get("id"), email=email)
    return envelope(hide_fields(user, PROFILE_HIDDEN_FIELDS), message="Login successful")


@public_auth_bp.route('/register', methods=['POST'])
def register():
    """Self-service sign-up; always an active client-role account with no client link."""
    data = dict(json_body())
    data.pop("active", None)
    data.pop("client_id", None)
    data["role_id"] = ROLE_CLIENT

    validate_payload(get_introspector().schema(tables.USERS), data, validator=validate_registration)

    with get_db_connection() as conn:
        repo = UserRepository(conn)
        user_id = repo.create(data)
        user = repo.find(user_id)

    log_auth_event("register", user_id=user_id, email=data.get("email"))
    return envelope(hide_fields(user, USER_HIDDEN_FIELDS), status=201, message="Record created successfully")


@private_auth_bp.route('/me', methods=['GET'])
@login_required
def me():
    actor = current_actor()
    profile = hide_fields(actor.to_session(), ("user_id", "role_id"))
    profile[SESSION_ACTIVITY_KEY] = actor.last_activity
    return envelope(profile)


@private_auth_bp.route('/logout', methods=['POST'])
def logout():
    if not session.get("actor"):
        return error_response(400, "No active session")
    user_id = session["actor"].get("user_id")
    end_session()
    log_auth_event("logout", user_id=user_id)
    return envelope(message="Logged out successfully")


@private_auth_bp.route('/users/me/unsubscribe', methods=['PATCH'])
@login_required
def unsubscribe():
    """Deactivate the caller's own account and end the session."""
    actor = current_actor()
    with get_db_connection() as conn:
        UserRepository(conn).deactivate(actor.user_id)

    end_session()
    log_auth_event("unsubscribe", user_id=actor.user_id, email=actor.email)
    return envelope(message="User unsubscribed successfully")
