#!/usr/bin/env python3
"""
WSGI entry point for the Jersey Catalog API.

This module provides the WSGI application interface for production deployment
with Gunicorn.

Usage:
    gunicorn --bind 127.0.0.1:5001 wsgi:application

Startup loads the metadata of every resource table; a missing table aborts
the process before it serves a request.

For development, use the Flask development server instead:
    cd src && python -m api.app
"""

import sys
import os

# Add the src directory to Python path
# This allows imports like "from api.app import create_app"
src_path = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

# Load environment variables from .env file
from dotenv import load_dotenv
env_path = os.path.join(os.path.dirname(os.path.abspath(__file__)), '.env')
if os.path.exists(env_path):
    load_dotenv(env_path)

from api.app import create_app
from database.schema import get_introspector, tables

# Fail fast on a schema the API cannot serve
get_introspector().validate(tables.RESOURCE_TABLES)

# Create the WSGI application
application = create_app()

# For local testing with: python wsgi.py
if __name__ == "__main__":
    application.run(host='0.0.0.0', port=5001, debug=False)
