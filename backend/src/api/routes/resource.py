"""
Jersey Catalog API - Resource Controller
========================================

The CRUD flow every resource blueprint shares:

    index    GET    /<resource>         -> 200 list
    show     GET    /<resource>/<id>    -> 200 record | 404
    store    POST   /<resource>         -> 201 record | 400 | 422 | 409
    update   PUT    /<resource>/<id>    -> 200 record (+ ignored fields) | 400 | 404 | 422
    destroy  DELETE /<resource>/<id>    -> 200 | 404

Every read strips the resource's hidden fields. Writes are re-read so the
response shows what was stored (display labels included).
"""

from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Type

from flask import abort, request

from api.responses import envelope, error_response, hide_fields, hide_fields_all
from api.validation import validate_payload
from database.connection import get_db_connection
from database.repositories.generic_repository import GenericRepository, UpdateResult
from database.schema import get_introspector
from utils.logger import logger


def json_body() -> Dict[str, Any]:
    """Request JSON object; aborts with 400 when missing or not an object."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict) or not data:
        abort(400, description="Invalid JSON")
    return data


def update_message(result: UpdateResult) -> str:
    if result.not_updated:
        return ("Record updated with errors. These fields cannot be updated: "
                + ", ".join(result.not_updated))
    return "Record updated successfully"


class ResourceController:
    """
    Generic endpoint logic for one repository class.

    Args:
        repository_class: GenericRepository subclass bound to the table
        hidden_fields: Columns never returned to clients
        validator: Resource rules (defaults to the table's registered rules)
    """

    def __init__(self,
                 repository_class: Type[GenericRepository],
                 hidden_fields: Iterable[str] = (),
                 validator: Optional[Callable[..., Dict[str, str]]] = None):
        self.repository_class = repository_class
        self.hidden_fields = tuple(hidden_fields)
        self.validator = validator

    @property
    def name(self) -> str:
        return self.repository_class.table

    def repository(self, conn) -> GenericRepository:
        return self.repository_class(conn)

    # Read hooks; ProductController overrides them to add pricing
    def read_all(self, repo: GenericRepository, filters: Optional[Mapping[str, Any]] = None) -> List[Dict[str, Any]]:
        return repo.all(filters)

    def read_one(self, repo: GenericRepository, key: Any) -> Optional[Dict[str, Any]]:
        return repo.find(key)

    def validate(self, data: Mapping[str, Any], is_update: bool = False) -> None:
        validate_payload(get_introspector().schema(self.name), data,
                         is_update=is_update, validator=self.validator)

    def index(self, filters: Optional[Mapping[str, Any]] = None):
        with get_db_connection() as conn:
            records = self.read_all(self.repository(conn), filters)
        return envelope(hide_fields_all(records, self.hidden_fields))

    def show(self, key: Any):
        with get_db_connection() as conn:
            record = self.read_one(self.repository(conn), key)
        if record is None:
            return error_response(404, "Record not found")
        return envelope(hide_fields(record, self.hidden_fields))

    def store(self, data: Mapping[str, Any]):
        self.validate(data)
        with get_db_connection() as conn:
            repo = self.repository(conn)
            key = repo.create(data)
            record = self.read_one(repo, key)

        logger.info(f"Stored {self.name} record", extra={"table": self.name, "key": key})
        return envelope(hide_fields(record, self.hidden_fields), status=201,
                        message="Record created successfully")

    def update(self, key: Any, data: Mapping[str, Any],
               granted: Iterable[str] = (), restricted: Iterable[str] = ()):
        self.validate(data, is_update=True)
        with get_db_connection() as conn:
            repo = self.repository(conn)
            if repo.find(key) is None:
                return error_response(404, "Record not found")

            result = repo.update(key, data, granted=granted, restricted=restricted)
            if not result.success:
                return error_response(
                    400, "No updatable fields supplied",
                    message=f"These fields cannot be updated: {', '.join(result.not_updated)}"
                )
            record = self.read_one(repo, key)

        return envelope(hide_fields(record, self.hidden_fields), message=update_message(result))

    def destroy(self, key: Any):
        with get_db_connection() as conn:
            repo = self.repository(conn)
            if repo.find(key) is None:
                return error_response(404, "Record not found")
            deleted = repo.delete(key)

        if not deleted:
            return error_response(500, "Could not delete the record")
        return envelope(message="Record deleted successfully")
