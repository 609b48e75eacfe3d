"""
Jersey Catalog API - API Documentation Endpoint
"""

from flask import Blueprint, current_app, jsonify

from api.openapi import build_openapi
from database.schema import get_introspector

docs_bp = Blueprint('docs', __name__)


@docs_bp.route('/api-docs.json', methods=['GET'])
def api_docs():
    """OpenAPI 3 document, generated on each request from routes and schema."""
    return jsonify(build_openapi(current_app, get_introspector().schema))
