"""
Jersey Catalog API - Health Check Endpoint
Provides API health status, database connectivity and schema cache state.
"""

from datetime import datetime, timezone

from flask import Blueprint
from sqlalchemy import text

from api.responses import envelope
from database.connection import get_db_connection
from database.schema import get_introspector
from utils.logger import logger

health_bp = Blueprint('health', __name__)

API_VERSION = "1.0.0"


@health_bp.route('/health', methods=['GET'])
def health_check():
    """
    Health check endpoint.

    Response:
        200 OK: All systems operational
        503 Service Unavailable: Database connection failed
    """
    health_data = {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "api_version": API_VERSION,
        "checks": {}
    }

    try:
        with get_db_connection() as conn:
            conn.execute(text("SELECT 1")).fetchone()

        health_data["checks"]["database"] = {
            "status": "healthy",
            "message": "Database connection successful"
        }
    except Exception as e:
        logger.error(f"Health check failed: {e}", exc_info=True)
        health_data["status"] = "unhealthy"
        health_data["checks"]["database"] = {
            "status": "unhealthy",
            "message": "Database connection failed"
        }
        return envelope(health_data, status=503, error="Database unavailable", success=False)

    cache_stats = get_introspector().cache.get_stats()
    health_data["checks"]["schema_cache"] = {
        "status": "healthy" if cache_stats["total_entries"] else "empty",
        "tables": cache_stats["tables"],
    }
    if not cache_stats["total_entries"]:
        health_data["status"] = "degraded"

    return envelope(health_data)
