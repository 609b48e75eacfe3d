"""
Jersey Catalog API - Session Authentication Middleware
Guards private endpoints with the signed session cookie.

Session layout (JSON-safe, kept small for the cookie):
    session["actor"]         - ActorContext.to_session()
    session["last_activity"] - Unix timestamp of the last authenticated request
"""

import time
from functools import wraps
from typing import Optional

from flask import current_app, g, request, session

from api.responses import error_response
from models.actor import ActorContext
from utils.config import SESSION_TIMEOUT_SECONDS
from utils.logger import logger, log_auth_event

SESSION_ACTOR_KEY = "actor"
SESSION_ACTIVITY_KEY = "last_activity"

# Non-standard "Login Time-out" status used by the web client
SESSION_EXPIRED = 440


def start_session(actor: ActorContext) -> None:
    """Store the actor after a successful login."""
    session.clear()
    session.permanent = True
    session[SESSION_ACTOR_KEY] = actor.to_session()
    session[SESSION_ACTIVITY_KEY] = time.time()


def end_session() -> None:
    session.clear()


def current_actor() -> Optional[ActorContext]:
    """Actor resolved for this request by login_required, if any."""
    return getattr(g, "actor", None)


def _session_timeout() -> int:
    return int(current_app.config.get("SESSION_TIMEOUT_SECONDS", SESSION_TIMEOUT_SECONDS))


def login_required(f):
    """
    Decorator to require an authenticated session.

    Responses:
        401: No session
        440: Idle longer than the inactivity timeout (session is cleared)

    On success the actor is available as flask.g.actor and the activity
    timestamp is refreshed.

    Usage:
        @users_bp.route('/me')
        @login_required
        def me():
            return envelope(current_actor().to_session())
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        stored = session.get(SESSION_ACTOR_KEY)
        if not stored:
            logger.warning("Missing session", extra={
                "path": request.path,
                "remote_addr": request.remote_addr
            })
            return error_response(401, "You must log in")

        last_activity = session.get(SESSION_ACTIVITY_KEY)
        now = time.time()
        if last_activity is not None and now - float(last_activity) > _session_timeout():
            log_auth_event("session_expired", user_id=stored.get("user_id"))
            end_session()
            return error_response(SESSION_EXPIRED, "Session expired due to inactivity")

        g.actor = ActorContext.from_session(stored, last_activity=last_activity)
        session[SESSION_ACTIVITY_KEY] = now
        return f(*args, **kwargs)

    return decorated_function


def roles_required(*roles: int):
    """
    Decorator to restrict an endpoint to some roles.

    Must be applied below login_required.
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            actor = current_actor()
            if actor is None or not actor.has_role(*roles):
                logger.warning("Role check failed", extra={
                    "path": request.path,
                    "user_id": actor.user_id if actor else None,
                    "required_roles": list(roles)
                })
                return error_response(403, "You do not have permission to perform this action")
            return f(*args, **kwargs)

        return decorated_function

    return decorator
