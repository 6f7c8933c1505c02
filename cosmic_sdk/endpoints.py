"""Endpoint resolution.

:func:`resolve` maps an operation and its parameters to an HTTP method, a
path (or absolute URL for the workers host), query parameters and a body.
It performs no I/O. Per-operation behaviour comes from the static
:data:`OPERATIONS` table rather than branching in the resolver.
"""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Union
from urllib.parse import quote

from .exceptions import MissingIdentifierError, MissingWriteKeyError
from .helpers import is_blank
from .types import JSONType, QueryFilter, QueryParams

API_VERSION = "v3"


class Operation(str, Enum):
    # Objects
    FIND = "find"
    FIND_REGEX = "find_regex"
    FIND_ONE = "find_one"
    INSERT_ONE = "insert_one"
    UPDATE_ONE = "update_one"
    DELETE_ONE = "delete_one"
    GET_OBJECT_REVISIONS = "get_object_revisions"
    SEARCH_OBJECTS = "search_objects"
    # Media
    GET_MEDIA = "get_media"
    UPLOAD_MEDIA = "upload_media"
    GET_MEDIA_OBJECT = "get_media_object"
    DELETE_MEDIA = "delete_media"
    # Bucket
    GET_BUCKET = "get_bucket"
    UPDATE_BUCKET_SETTINGS = "update_bucket_settings"
    TEST_CONNECTION = "test_connection"
    # Users
    GET_USERS = "get_users"
    GET_USER = "get_user"
    ADD_USER = "add_user"
    DELETE_USER = "delete_user"
    # Webhooks
    GET_WEBHOOKS = "get_webhooks"
    ADD_WEBHOOK = "add_webhook"
    DELETE_WEBHOOK = "delete_webhook"
    # AI
    GENERATE_TEXT = "generate_text"
    GENERATE_IMAGE = "generate_image"


class Host(str, Enum):
    API = "api"
    WORKERS = "workers"


class Status(str, Enum):
    PUBLISHED = "published"
    DRAFT = "draft"
    ANY = "any"


class Sorting(str, Enum):
    CREATED_ASCENDING = "created_at"
    CREATED_DESCENDING = "-created_at"
    MODIFIED_ASCENDING = "modified_at"
    MODIFIED_DESCENDING = "-modified_at"
    RANDOM = "random"
    ORDER = "order"


@dataclass(frozen=True)
class OperationSpec:
    """Static capabilities of one operation.

    ``path`` is relative to ``/v3/buckets/{bucket}`` and may contain ``{id}``.
    """

    method: str
    path: str
    requires_id: bool = False
    requires_write_key: bool = False
    write_key_in_query: bool = False
    host: Host = Host.API
    filtered: bool = False

    @property
    def sends_authorization(self) -> bool:
        return self.requires_write_key and self.method != "GET"


def _read(method: str, path: str, **kwargs: Any) -> OperationSpec:
    return OperationSpec(method, path, **kwargs)


def _write(method: str, path: str, **kwargs: Any) -> OperationSpec:
    kwargs.setdefault("write_key_in_query", True)
    return OperationSpec(method, path, requires_write_key=True, **kwargs)


OPERATIONS: Dict[Operation, OperationSpec] = {
    Operation.FIND: _read("GET", "/objects", filtered=True),
    Operation.FIND_REGEX: _read("GET", "/objects", filtered=True),
    Operation.FIND_ONE: _read("GET", "/objects/{id}", requires_id=True),
    Operation.INSERT_ONE: _write("POST", "/objects"),
    Operation.UPDATE_ONE: _write("PATCH", "/objects/{id}", requires_id=True),
    Operation.DELETE_ONE: _write("DELETE", "/objects/{id}", requires_id=True),
    Operation.GET_OBJECT_REVISIONS: _read("GET", "/objects/{id}/revisions", requires_id=True),
    Operation.SEARCH_OBJECTS: _read("POST", "/objects/search"),
    Operation.GET_MEDIA: _read("GET", "/media"),
    Operation.UPLOAD_MEDIA: _write("POST", "/media/insert-one", host=Host.WORKERS, write_key_in_query=False),
    Operation.GET_MEDIA_OBJECT: _read("GET", "/media/{id}", requires_id=True),
    Operation.DELETE_MEDIA: _write("DELETE", "/media/{id}", requires_id=True),
    Operation.GET_BUCKET: _read("GET", ""),
    Operation.UPDATE_BUCKET_SETTINGS: _write("PATCH", "/settings"),
    Operation.TEST_CONNECTION: _read("GET", ""),
    Operation.GET_USERS: _read("GET", "/users"),
    Operation.GET_USER: _read("GET", "/users/{id}", requires_id=True),
    Operation.ADD_USER: _write("POST", "/users"),
    Operation.DELETE_USER: _write("DELETE", "/users/{id}", requires_id=True),
    Operation.GET_WEBHOOKS: _read("GET", "/webhooks"),
    Operation.ADD_WEBHOOK: _write("POST", "/webhooks"),
    Operation.DELETE_WEBHOOK: _write("DELETE", "/webhooks/{id}", requires_id=True),
    Operation.GENERATE_TEXT: _write("POST", "/ai/text", host=Host.WORKERS, write_key_in_query=False),
    Operation.GENERATE_IMAGE: _write("POST", "/ai/image", host=Host.WORKERS, write_key_in_query=False),
}


@dataclass(frozen=True)
class ResolvedEndpoint:
    """Result of :func:`resolve`.

    ``path`` is either relative to the API base URL or, for the workers host,
    an absolute URL.
    """

    operation: Operation
    method: str
    path: str
    params: QueryParams = field(default_factory=dict)
    body: Optional[Dict[str, Any]] = None
    authorization: Optional[str] = None


def build_query_json(object_type: Optional[str], query: Optional[QueryFilter] = None) -> str:
    """Serialise a filter for the ``query`` parameter.

    The object type always comes first; caller filters are merged in as-is
    (dotted paths, ``$in``/``$gte``/``$exists``/... operator maps). Nothing is
    validated here, the service evaluates the filter.

    Example:
        >>> build_query_json("episode", {"metadata.regular_hosts.id": "host-id-123"})
        '{"type":"episode","metadata.regular_hosts.id":"host-id-123"}'
    """
    payload: Dict[str, JSONType] = {}
    if not is_blank(object_type):
        payload["type"] = object_type
    if query:
        for key, value in query.items():
            payload[key] = value
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False)


def regex_filter(field_name: str, pattern: str, options: Optional[str] = "i") -> Dict[str, JSONType]:
    """Legacy regex filter on a single field."""
    condition: Dict[str, JSONType] = {"$regex": pattern}
    if not is_blank(options):
        condition["$options"] = options
    return {field_name: condition}


def _stringify(value: Union[None, str, int, Enum]) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def resolve(
    operation: Operation,
    *,
    bucket: str,
    read_key: str,
    write_key: Optional[str] = None,
    workers_url: str = "https://workers.cosmicjs.com",
    id: Optional[str] = None,
    object_type: Optional[str] = None,
    query: Optional[QueryFilter] = None,
    props: Optional[str] = None,
    limit: Optional[int] = None,
    skip: Optional[int] = None,
    sort: Union[None, Sorting, str] = None,
    status: Union[None, Status, str] = None,
    depth: Optional[int] = None,
    body: Optional[Dict[str, Any]] = None,
) -> ResolvedEndpoint:
    """Resolve an operation into method, path, query parameters and body.

    Args:
        operation: Operation to resolve
        bucket: Bucket slug
        read_key: Read key, sent as ``read_key`` on read operations
        write_key: Write key, required by mutating operations
        workers_url: Base URL of the workers host (uploads and AI)
        id: Target id for per-id operations
        object_type: Object type for ``find``-class operations
        query: Extra filter fields merged into the ``query`` JSON
        props, limit, skip, sort, status, depth: Passed through when given
        body: JSON body fields

    Returns:
        ResolvedEndpoint

    Raises:
        MissingIdentifierError: If a per-id operation has no id
        MissingWriteKeyError: If a write operation has no write key
    """
    spec = OPERATIONS[operation]

    if spec.requires_id and is_blank(id):
        raise MissingIdentifierError(operation.value)
    if spec.requires_write_key and is_blank(write_key):
        raise MissingWriteKeyError(operation.value)

    relative = spec.path.format(id=quote(id, safe="") if id is not None else "")
    path = f"/{API_VERSION}/buckets/{quote(bucket, safe='')}{relative}"
    if spec.host is Host.WORKERS:
        path = workers_url.rstrip("/") + path

    params: QueryParams = {}
    if spec.filtered:
        params["query"] = build_query_json(object_type, query)
    if not spec.requires_write_key:
        params["read_key"] = read_key
    elif spec.write_key_in_query:
        params["write_key"] = write_key

    for name, value in (
        ("props", props),
        ("limit", limit),
        ("skip", skip),
        ("sort", sort),
        ("status", status),
        ("depth", depth),
    ):
        text = _stringify(value)
        if text is not None:
            params[name] = text

    return ResolvedEndpoint(
        operation=operation,
        method=spec.method,
        path=path,
        params=params,
        body=body,
        authorization=write_key if spec.sends_authorization else None,
    )
