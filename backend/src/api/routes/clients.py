"""
Jersey Catalog API - Clients API Routes
=======================================

GET    /private/clients
GET    /private/clients/with-discount
GET    /private/clients/<id>
POST   /private/clients              admin, editor
PUT    /private/clients/<id>         admin, editor
DELETE /private/clients/<id>         admin, editor

tax_id is fixed once the client exists and category is an enum; updates
that carry them report them as not updated.
"""

from flask import Blueprint

from api.middleware.auth import login_required, roles_required
from api.responses import envelope
from api.routes.resource import ResourceController, json_body
from database.connection import get_db_connection
from database.repositories.client_repository import ClientRepository
from models.actor import ROLE_ADMIN, ROLE_EDITOR

clients_bp = Blueprint('clients', __name__)

STAFF = (ROLE_ADMIN, ROLE_EDITOR)

clients = ResourceController(ClientRepository)


@clients_bp.route('/clients', methods=['GET'])
@login_required
def list_clients():
    return clients.index()


@clients_bp.route('/clients/with-discount', methods=['GET'])
@login_required
def list_clients_with_discount():
    with get_db_connection() as conn:
        records = ClientRepository(conn).find_all_with_discount()
    return envelope(records)


@clients_bp.route('/clients/<int:client_id>', methods=['GET'])
@login_required
def get_client(client_id: int):
    return clients.show(client_id)


@clients_bp.route('/clients', methods=['POST'])
@login_required
@roles_required(*STAFF)
def create_client():
    return clients.store(json_body())


@clients_bp.route('/clients/<int:client_id>', methods=['PUT', 'PATCH'])
@login_required
@roles_required(*STAFF)
def update_client(client_id: int):
    return clients.update(client_id, json_body())


@clients_bp.route('/clients/<int:client_id>', methods=['DELETE'])
@login_required
@roles_required(*STAFF)
def delete_client(client_id: int):
    return clients.destroy(client_id)
