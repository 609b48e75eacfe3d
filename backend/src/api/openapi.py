"""
Jersey Catalog API - OpenAPI Document
Builds an OpenAPI 3 document from the registered Flask routes and the
introspected table schemas; no per-entity schema is written by hand.
"""

import re
from typing import Any, Callable, Dict, Iterable, List, Optional

from flask import Flask

from database.exceptions import SchemaError
from database.schema import tables
from database.schema.metadata import ColumnMetadata, TableSchema
from utils.logger import logger

OPENAPI_VERSION = "3.0.3"

TYPE_MAP = {
    "int": "integer",
    "bigint": "integer",
    "smallint": "integer",
    "mediumint": "integer",
    "decimal": "number",
    "float": "number",
    "double": "number",
    "tinyint": "boolean",
}

DATE_EXAMPLES = {
    "date": "2024-01-01",
    "datetime": "2024-01-01 12:00:00",
    "timestamp": "2024-01-01 12:00:00",
}

# Example values that pass the request validators
FIELD_EXAMPLES = {
    "email": "test@example.com",
    "contact_email": "test@example.com",
    "tax_id": "99999999-9",
    "birth_date": "2000-10-01",
    "password": "secret123",
}

LOGIN_EXAMPLES = {
    "admin": {"summary": "Administrator (role_id=1)", "value": {"email": "admin@example.com", "password": "123456"}},
    "editor": {"summary": "Editor (role_id=2)", "value": {"email": "editor@example.com", "password": "123456"}},
    "client": {"summary": "Client (role_id=3)", "value": {"email": "client@example.com", "password": "123456"}},
}

_PATH_PARAM = re.compile(r"<(?:(\w+):)?(\w+)>")


def column_property(column: ColumnMetadata) -> Dict[str, Any]:
    """OpenAPI property (type, example, enum) for one column."""
    prop_type = TYPE_MAP.get(column.data_type, "string")
    if prop_type == "integer":
        example: Any = 1
    elif prop_type == "number":
        example = 12.5
    elif prop_type == "boolean":
        example = True
    else:
        example = DATE_EXAMPLES.get(column.data_type, f"{column.name}-example")

    prop: Dict[str, Any] = {"type": prop_type, "example": example}
    if column.is_enum and column.enum_values:
        prop["enum"] = list(column.enum_values)
        prop["example"] = column.enum_values[0]
    if column.max_length and prop_type == "string":
        prop["maxLength"] = column.max_length
    if column.is_nullable:
        prop["nullable"] = True
    return prop


def table_component(schema: TableSchema) -> Dict[str, Any]:
    """Component schema: every column, required = NOT NULL non-key columns."""
    return {
        "type": "object",
        "properties": {column.name: column_property(column) for column in schema.metadata.columns},
        "required": [
            column.name for column in schema.metadata.columns
            if not column.is_nullable and not column.is_primary_key
        ],
    }


def request_examples(schema: TableSchema) -> Dict[str, Dict[str, Any]]:
    """POST example over the fillable set, PUT example over the updatable set."""
    properties = table_component(schema)["properties"]

    def example_for(name: str) -> Any:
        return FIELD_EXAMPLES.get(name, properties[name]["example"])

    enums = schema.enum_columns()
    return {
        "create": {name: example_for(name) for name in schema.classification.fillable},
        "update": {
            name: example_for(name)
            for name in schema.classification.updatable
            if name not in enums
        },
    }


def flask_path(rule: str) -> str:
    """'/private/users/<int:user_id>' -> '/private/users/{user_id}'."""
    return _PATH_PARAM.sub(r"{\2}", rule)


def _path_parameters(rule: str) -> List[Dict[str, Any]]:
    params = []
    for converter, name in _PATH_PARAM.findall(rule):
        params.append({
            "name": name,
            "in": "path",
            "required": True,
            "schema": {"type": "integer" if converter == "int" else "string"},
        })
    return params


def _table_for(endpoint: str, rule: str) -> Optional[str]:
    if "/stock" in rule:
        return tables.STOCK
    blueprint = endpoint.split(".", 1)[0]
    return blueprint if blueprint in tables.RESOURCE_TABLES else None


def build_openapi(app: Flask, load_schema: Callable[[str], TableSchema],
                  title: str = "Jersey Catalog API", version: str = "1.0.0") -> Dict[str, Any]:
    """
    Assemble the document.

    Args:
        app: Application whose url_map is documented
        load_schema: Table name -> TableSchema (the introspector's schema())
    """
    document: Dict[str, Any] = {
        "openapi": OPENAPI_VERSION,
        "info": {
            "title": title,
            "version": version,
            "description": (
                "Schemas are inferred from the database at runtime. "
                "Routes under /private need a session: call /public/login first."
            ),
        },
        "paths": {},
        "tags": [],
        "components": {"schemas": {}},
    }

    examples: Dict[str, Dict[str, Dict[str, Any]]] = {}
    tags = set()

    for rule in sorted(app.url_map.iter_rules(), key=lambda r: r.rule):
        if rule.endpoint == "static":
            continue
        path = flask_path(rule.rule)
        table = _table_for(rule.endpoint, rule.rule)
        tag = table or rule.endpoint.split(".", 1)[0]
        tags.add(tag)

        if table and table not in document["components"]["schemas"]:
            try:
                schema = load_schema(table)
            except SchemaError as e:
                logger.warning(f"Skipping schema for {table}: {e}")
                table = None
            else:
                document["components"]["schemas"][table] = table_component(schema)
                examples[table] = request_examples(schema)

        for method in sorted((rule.methods or set()) - {"HEAD", "OPTIONS"}):
            operation: Dict[str, Any] = {
                "tags": [tag],
                "operationId": f"{rule.endpoint}_{method.lower()}",
                "parameters": _path_parameters(rule.rule),
                "responses": _responses(table, method),
            }
            if rule.rule.startswith("/private"):
                operation["security"] = [{"sessionCookie": []}]
            body = _request_body(rule.endpoint, table, method, examples)
            if body:
                operation["requestBody"] = body
            document["paths"].setdefault(path, {})[method.lower()] = operation

    document["tags"] = [{"name": tag} for tag in sorted(tags)]
    document["components"]["securitySchemes"] = {
        "sessionCookie": {"type": "apiKey", "in": "cookie", "name": "session"},
    }
    return document


def _responses(table: Optional[str], method: str) -> Dict[str, Any]:
    ok = {"description": "Success"}
    if table:
        ok["content"] = {"application/json": {"schema": {"$ref": f"#/components/schemas/{table}"}}}
    responses = {"201" if method == "POST" and table else "200": ok}
    responses.update({
        "401": {"description": "Not logged in"},
        "403": {"description": "Forbidden"},
        "440": {"description": "Session expired"},
    })
    if method in ("POST", "PUT", "PATCH"):
        responses["422"] = {"description": "Validation failed"}
    return responses


def _request_body(endpoint: str, table: Optional[str], method: str,
                  examples: Dict[str, Dict[str, Dict[str, Any]]]) -> Optional[Dict[str, Any]]:
    if method not in ("POST", "PUT", "PATCH"):
        return None
    if endpoint.endswith(".login"):
        return {"required": True, "content": {"application/json": {"examples": LOGIN_EXAMPLES}}}
    if endpoint.endswith(".register") and tables.USERS in examples:
        example = dict(examples[tables.USERS]["create"])
        example.pop("role_id", None)
        example.pop("active", None)
        example.pop("client_id", None)
        return {"required": True, "content": {"application/json": {"example": example}}}
    if not table or table not in examples:
        return None

    example = dict(examples[table]["create" if method == "POST" else "update"])
    if table == tables.STOCK:
        example.pop("product_id", None)
    return {"required": True, "content": {"application/json": {"example": example}}}
