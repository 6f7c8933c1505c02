"""Typed records for Cosmic resources.

Each record has a ``from_json`` classmethod that accepts a decoded JSON dict
and raises :class:`~cosmic_sdk.exceptions.ValueDecodingError` when required
fields are missing or have the wrong type. Unknown fields are ignored; the
original dict is kept on ``raw`` where it is useful for debugging.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Type, TypeVar

from .exceptions import RemoteErrorType, ValueDecodingError
from .helpers import canonical_timestamp, is_blank
from .metadata import ObjectMetadata
from .types import JSONType, ObjectBody
from .values import DynamicValue

T = TypeVar("T")

DRAFT_STATUS = "draft"


def _expect_dict(data: Any, where: str) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise ValueDecodingError(f"{where}: expected a JSON object, got {type(data).__name__}")
    return data


def _field(data: Dict[str, Any], key: str, kind: Type[T], where: str, required: bool = False) -> Optional[T]:
    value = data.get(key)
    if value is None:
        if required:
            raise ValueDecodingError(f"{where}: missing required field '{key}'")
        return None
    if kind is int and isinstance(value, bool) or not isinstance(value, kind):
        raise ValueDecodingError(f"{where}: field '{key}' must be {kind.__name__}, got {type(value).__name__}")
    return value


def _list(data: Dict[str, Any], key: str, where: str, required: bool = True) -> List[Any]:
    value = data.get(key)
    if value is None and not required:
        return []
    if not isinstance(value, list):
        raise ValueDecodingError(f"{where}: field '{key}' must be a list")
    return value


def _values(data: Dict[str, Any], key: str, where: str) -> Optional[Dict[str, DynamicValue]]:
    value = _field(data, key, dict, where)
    if value is None:
        return None
    return {k: DynamicValue.from_json(v) for k, v in value.items()}


def _unwrap(data: Any, key: str, where: str) -> Dict[str, Any]:
    """Accept both ``{key: {...}}`` and the flat record."""
    data = _expect_dict(data, where)
    inner = data.get(key)
    if isinstance(inner, dict):
        return inner
    return data


# -------------------------
# Objects
# -------------------------
@dataclass
class CmsObject:
    """An object as returned by the service (read-only from the client's side)."""

    title: str
    id: Optional[str] = None
    slug: Optional[str] = None
    content: Optional[str] = None
    bucket: Optional[str] = None
    created_at: Optional[str] = None
    created_by: Optional[str] = None
    modified_at: Optional[str] = None
    modified_by: Optional[str] = None
    status: Optional[str] = None
    published_at: Optional[str] = None
    publish_at: Optional[str] = None
    unpublish_at: Optional[str] = None
    type: Optional[str] = None
    locale: Optional[str] = None
    thumbnail: Optional[str] = None
    metadata: Optional[ObjectMetadata] = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_json(cls, data: Any) -> "CmsObject":
        data = _expect_dict(data, "object")
        w = "object"
        return cls(
            title=_field(data, "title", str, w, required=True),
            id=_field(data, "id", str, w),
            slug=_field(data, "slug", str, w),
            content=_field(data, "content", str, w),
            bucket=_field(data, "bucket", str, w),
            created_at=_field(data, "created_at", str, w),
            created_by=_field(data, "created_by", str, w),
            modified_at=_field(data, "modified_at", str, w),
            modified_by=_field(data, "modified_by", str, w),
            status=_field(data, "status", str, w),
            published_at=canonical_timestamp(data.get("published_at")),
            publish_at=canonical_timestamp(data.get("publish_at")),
            unpublish_at=canonical_timestamp(data.get("unpublish_at")),
            type=_field(data, "type", str, w),
            locale=_field(data, "locale", str, w),
            thumbnail=_field(data, "thumbnail", str, w),
            metadata=ObjectMetadata.from_container(data),
            raw=data,
        )

    def to_json(self) -> Dict[str, JSONType]:
        out: Dict[str, JSONType] = {
            key: getattr(self, key)
            for key in (
                "id", "slug", "title", "content", "bucket", "created_at", "created_by",
                "modified_at", "modified_by", "status", "published_at", "publish_at",
                "unpublish_at", "type", "locale", "thumbnail",
            )
            if getattr(self, key) is not None
        }
        if self.metadata is not None:
            out.update(self.metadata.to_json())
        return out

    def metafield_value(self, key: str) -> Optional[DynamicValue]:
        if self.metadata is None:
            return None
        return self.metadata.lookup(key)

    @property
    def metadata_dict(self) -> Optional[Dict[str, DynamicValue]]:
        if self.metadata is None:
            return None
        return self.metadata.to_dict()


@dataclass
class ObjectDraft:
    """Caller-supplied fields for creating or updating an object.

    This is the write-side shape; it is narrower than :class:`CmsObject`.
    """

    title: Optional[str] = None
    type: Optional[str] = None
    slug: Optional[str] = None
    content: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None
    status: Optional[str] = None
    publish_at: Optional[str] = None
    unpublish_at: Optional[str] = None
    locale: Optional[str] = None
    thumbnail: Optional[str] = None

    @property
    def is_scheduled(self) -> bool:
        return not is_blank(self.publish_at) or not is_blank(self.unpublish_at)

    def to_body(self) -> ObjectBody:
        """Encode the request body.

        Scheduled content (publish_at or unpublish_at set) is always sent as a
        draft whatever status was requested. Blank fields are left out.
        """
        status = DRAFT_STATUS if self.is_scheduled else _enum_value(self.status)
        body: Dict[str, Any] = {}
        for key, value in (
            ("type", self.type),
            ("title", self.title),
            ("slug", self.slug),
            ("content", self.content),
            ("status", status),
            ("publish_at", self.publish_at),
            ("unpublish_at", self.unpublish_at),
            ("locale", self.locale),
            ("thumbnail", self.thumbnail),
        ):
            if not is_blank(value):
                body[key] = value
        if self.metadata is not None:
            body["metadata"] = {key: DynamicValue.of(v).to_json() for key, v in self.metadata.items()}
        return body  # type: ignore[return-value]


def _enum_value(value: Any) -> Any:
    return getattr(value, "value", value)


@dataclass
class ObjectsResponse:
    objects: List[CmsObject]
    total: Optional[int] = None
    limit: Optional[int] = None
    skip: Optional[int] = None

    @classmethod
    def from_json(cls, data: Any) -> "ObjectsResponse":
        data = _expect_dict(data, "objects response")
        w = "objects response"
        return cls(
            objects=[CmsObject.from_json(o) for o in _list(data, "objects", w, required=False)],
            total=_field(data, "total", int, w),
            limit=_field(data, "limit", int, w),
            skip=_field(data, "skip", int, w),
        )


@dataclass
class ObjectResponse:
    object: CmsObject

    @classmethod
    def from_json(cls, data: Any) -> "ObjectResponse":
        data = _expect_dict(data, "object response")
        if "object" not in data:
            raise ValueDecodingError("object response: missing required field 'object'")
        return cls(object=CmsObject.from_json(data["object"]))


@dataclass
class SuccessResponse:
    """Acknowledgement of a write; some endpoints echo the written object."""

    message: Optional[str] = None
    object: Optional[CmsObject] = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_json(cls, data: Any) -> "SuccessResponse":
        if data is None:
            return cls()
        data = _expect_dict(data, "response")
        obj = data.get("object")
        return cls(
            message=_field(data, "message", str, "response"),
            object=CmsObject.from_json(obj) if isinstance(obj, dict) else None,
            raw=data,
        )


@dataclass
class ObjectRevision:
    id: str
    title: str
    type: Optional[str] = None
    content: Optional[str] = None
    metadata: Optional[ObjectMetadata] = None
    status: Optional[str] = None
    created_at: Optional[str] = None
    modified_at: Optional[str] = None

    @classmethod
    def from_json(cls, data: Any) -> "ObjectRevision":
        data = _expect_dict(data, "revision")
        w = "revision"
        return cls(
            id=_field(data, "id", str, w, required=True),
            title=_field(data, "title", str, w, required=True),
            type=_field(data, "type", str, w),
            content=_field(data, "content", str, w),
            metadata=ObjectMetadata.from_container(data),
            status=_field(data, "status", str, w),
            created_at=canonical_timestamp(data.get("created_at")),
            modified_at=canonical_timestamp(data.get("modified_at")),
        )


@dataclass
class RevisionsResponse:
    revisions: List[ObjectRevision]
    total: Optional[int] = None

    @classmethod
    def from_json(cls, data: Any) -> "RevisionsResponse":
        data = _expect_dict(data, "revisions response")
        return cls(
            revisions=[ObjectRevision.from_json(r) for r in _list(data, "revisions", "revisions response")],
            total=_field(data, "total", int, "revisions response"),
        )


# -------------------------
# Media
# -------------------------
@dataclass
class CmsMedia:
    id: str
    name: str
    url: str
    original_name: Optional[str] = None
    size: Optional[int] = None
    type: Optional[str] = None
    bucket: Optional[str] = None
    created_at: Optional[str] = None
    folder: Optional[str] = None
    alt_text: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None
    imgix_url: Optional[str] = None
    metadata: Optional[Dict[str, DynamicValue]] = None

    @classmethod
    def from_json(cls, data: Any) -> "CmsMedia":
        data = _unwrap(data, "media", "media")
        w = "media"
        return cls(
            id=_field(data, "id", str, w, required=True),
            name=_field(data, "name", str, w, required=True),
            url=_field(data, "url", str, w, required=True),
            original_name=_field(data, "original_name", str, w),
            size=_field(data, "size", int, w),
            type=_field(data, "type", str, w),
            bucket=_field(data, "bucket", str, w),
            created_at=canonical_timestamp(data.get("created_at")),
            folder=_field(data, "folder", str, w),
            alt_text=_field(data, "alt_text", str, w),
            width=_field(data, "width", int, w),
            height=_field(data, "height", int, w),
            imgix_url=_field(data, "imgix_url", str, w),
            metadata=_values(data, "metadata", w),
        )


@dataclass
class MediaResponse:
    media: List[CmsMedia]
    total: Optional[int] = None
    limit: Optional[int] = None
    skip: Optional[int] = None

    @classmethod
    def from_json(cls, data: Any) -> "MediaResponse":
        data = _expect_dict(data, "media response")
        w = "media response"
        return cls(
            media=[CmsMedia.from_json(m) for m in _list(data, "media", w, required=False)],
            total=_field(data, "total", int, w),
            limit=_field(data, "limit", int, w),
            skip=_field(data, "skip", int, w),
        )


# -------------------------
# Bucket
# -------------------------
@dataclass
class BucketSettings:
    title: str
    description: Optional[str] = None
    icon: Optional[str] = None
    website: Optional[str] = None
    objects_write_key: Optional[str] = None
    media_write_key: Optional[str] = None
    deploy_hook: Optional[str] = None
    env: Optional[Dict[str, str]] = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_json(cls, data: Any) -> "BucketSettings":
        data = _unwrap(data, "bucket", "bucket")
        w = "bucket"
        return cls(
            title=_field(data, "title", str, w, required=True),
            description=_field(data, "description", str, w),
            icon=_field(data, "icon", str, w),
            website=_field(data, "website", str, w),
            objects_write_key=_field(data, "objects_write_key", str, w),
            media_write_key=_field(data, "media_write_key", str, w),
            deploy_hook=_field(data, "deploy_hook", str, w),
            env=_field(data, "env", dict, w),
            raw=data,
        )

    def to_json(self) -> Dict[str, JSONType]:
        out = {
            "title": self.title,
            "description": self.description,
            "icon": self.icon,
            "website": self.website,
            "objects_write_key": self.objects_write_key,
            "media_write_key": self.media_write_key,
            "deploy_hook": self.deploy_hook,
            "env": self.env,
        }
        return {k: v for k, v in out.items() if v is not None}


# -------------------------
# Users / webhooks
# -------------------------
@dataclass
class CmsUser:
    id: str
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role: Optional[str] = None
    status: Optional[str] = None
    created_at: Optional[str] = None
    modified_at: Optional[str] = None

    @classmethod
    def from_json(cls, data: Any) -> "CmsUser":
        data = _unwrap(data, "user", "user")
        w = "user"
        return cls(
            id=_field(data, "id", str, w, required=True),
            email=_field(data, "email", str, w, required=True),
            first_name=_field(data, "first_name", str, w),
            last_name=_field(data, "last_name", str, w),
            role=_field(data, "role", str, w),
            status=_field(data, "status", str, w),
            created_at=canonical_timestamp(data.get("created_at")),
            modified_at=canonical_timestamp(data.get("modified_at")),
        )


@dataclass
class UsersResponse:
    users: List[CmsUser]
    total: Optional[int] = None

    @classmethod
    def from_json(cls, data: Any) -> "UsersResponse":
        data = _expect_dict(data, "users response")
        return cls(
            users=[CmsUser.from_json(u) for u in _list(data, "users", "users response", required=False)],
            total=_field(data, "total", int, "users response"),
        )


@dataclass
class CmsWebhook:
    id: str
    event: str
    endpoint: str
    created_at: Optional[str] = None
    modified_at: Optional[str] = None

    @classmethod
    def from_json(cls, data: Any) -> "CmsWebhook":
        data = _expect_dict(data, "webhook")
        w = "webhook"
        return cls(
            id=_field(data, "id", str, w, required=True),
            event=_field(data, "event", str, w, required=True),
            endpoint=_field(data, "endpoint", str, w, required=True),
            created_at=canonical_timestamp(data.get("created_at")),
            modified_at=canonical_timestamp(data.get("modified_at")),
        )


@dataclass
class WebhooksResponse:
    webhooks: List[CmsWebhook]
    total: Optional[int] = None

    @classmethod
    def from_json(cls, data: Any) -> "WebhooksResponse":
        data = _expect_dict(data, "webhooks response")
        return cls(
            webhooks=[CmsWebhook.from_json(h) for h in _list(data, "webhooks", "webhooks response", required=False)],
            total=_field(data, "total", int, "webhooks response"),
        )


# -------------------------
# AI
# -------------------------
@dataclass
class AITextResponse:
    text: str
    usage: Optional[Dict[str, DynamicValue]] = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_json(cls, data: Any) -> "AITextResponse":
        data = _expect_dict(data, "ai text response")
        return cls(
            text=_field(data, "text", str, "ai text response", required=True),
            usage=_values(data, "usage", "ai text response"),
            raw=data,
        )


@dataclass
class AIImageResponse:
    media: CmsMedia
    revised_prompt: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_json(cls, data: Any) -> "AIImageResponse":
        data = _expect_dict(data, "ai image response")
        if "media" not in data:
            raise ValueDecodingError("ai image response: missing required field 'media'")
        return cls(
            media=CmsMedia.from_json(data["media"]),
            revised_prompt=_field(data, "revised_prompt", str, "ai image response"),
            raw=data,
        )


# -------------------------
# Errors
# -------------------------
@dataclass
class ErrorResponse:
    """Error envelope: ``{status, type, message, details}``.

    ``type`` is None when the envelope omits it or sends a value outside
    :class:`RemoteErrorType`; ``status`` is None when absent.
    """

    message: str
    status: Optional[int] = None
    type: Optional[RemoteErrorType] = None
    details: Optional[Dict[str, Any]] = None

    @classmethod
    def from_json(cls, data: Any) -> "ErrorResponse":
        data = _expect_dict(data, "error response")
        w = "error response"
        return cls(
            message=_field(data, "message", str, w, required=True),
            status=_field(data, "status", int, w),
            type=RemoteErrorType.known(data.get("type")),
            details=_field(data, "details", dict, w),
        )
