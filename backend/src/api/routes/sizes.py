"""
Jersey Catalog API - Sizes API Routes
"""

from flask import Blueprint

from api.middleware.auth import login_required, roles_required
from api.routes.resource import ResourceController, json_body
from database.repositories.size_repository import SizeRepository
from models.actor import ROLE_ADMIN, ROLE_EDITOR

sizes_bp = Blueprint('sizes', __name__)

STAFF = (ROLE_ADMIN, ROLE_EDITOR)

sizes = ResourceController(SizeRepository)


@sizes_bp.route('/sizes', methods=['GET'])
@login_required
def list_sizes():
    return sizes.index()


@sizes_bp.route('/sizes/<int:size_id>', methods=['GET'])
@login_required
def get_size(size_id: int):
    return sizes.show(size_id)


@sizes_bp.route('/sizes', methods=['POST'])
@login_required
@roles_required(*STAFF)
def create_size():
    return sizes.store(json_body())


@sizes_bp.route('/sizes/<int:size_id>', methods=['PUT', 'PATCH'])
@login_required
@roles_required(*STAFF)
def update_size(size_id: int):
    return sizes.update(size_id, json_body())


@sizes_bp.route('/sizes/<int:size_id>', methods=['DELETE'])
@login_required
@roles_required(*STAFF)
def delete_size(size_id: int):
    return sizes.destroy(size_id)
