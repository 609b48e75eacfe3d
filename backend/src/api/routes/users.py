"""
Jersey Catalog API - Users API Routes
=====================================

GET    /private/users              admin
GET    /private/users/<id>         any authenticated user
POST   /private/users              admin
PUT    /private/users/<id>         admin, or the user themself
DELETE /private/users/<id>         admin

Only admins may change email, role_id, active or client_id; for anyone else those keys
come back in the "cannot be updated" list.
"""

from flask import Blueprint

from api.middleware.auth import current_actor, login_required, roles_required
from api.responses import error_response
from api.routes.resource import ResourceController, json_body
from database.repositories.user_repository import UserRepository, privileged_grants
from models.actor import ROLE_ADMIN

users_bp = Blueprint('users', __name__)

USER_HIDDEN_FIELDS = ("password", "role_id", "client_id")

users = ResourceController(UserRepository, hidden_fields=USER_HIDDEN_FIELDS)


@users_bp.route('/users', methods=['GET'])
@login_required
@roles_required(ROLE_ADMIN)
def list_users():
    return users.index()


@users_bp.route('/users/<int:user_id>', methods=['GET'])
@login_required
def get_user(user_id: int):
    return users.show(user_id)


@users_bp.route('/users', methods=['POST'])
@login_required
@roles_required(ROLE_ADMIN)
def create_user():
    return users.store(json_body())


@users_bp.route('/users/<int:user_id>', methods=['PUT', 'PATCH'])
@login_required
def update_user(user_id: int):
    actor = current_actor()
    if not actor.is_admin and actor.user_id != user_id:
        return error_response(403, "You cannot modify other users")
    return users.update(user_id, json_body(), **privileged_grants(actor))


@users_bp.route('/users/<int:user_id>', methods=['DELETE'])
@login_required
@roles_required(ROLE_ADMIN)
def delete_user(user_id: int):
    return users.destroy(user_id)
