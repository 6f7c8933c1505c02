"""Cosmic API client.

This module provides the CosmicClient class. Every operation runs the same
pipeline: resolve the endpoint, build the request, send it through the
transport once, then decode the response into a typed result.
"""
from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, BinaryIO, Callable, Dict, List, Optional, Tuple, TypeVar, Union

from .config import DEFAULT_BASE_URL, DEFAULT_TIMEOUT, DEFAULT_WORKERS_URL, ClientConfig
from .endpoints import Operation, Sorting, Status, regex_filter, resolve
from .exceptions import DecodingError, RemoteError, RemoteErrorType, ValueDecodingError
from .helpers import guess_mime_type, redact_url
from .models import (
    AIImageResponse,
    AITextResponse,
    BucketSettings,
    CmsMedia,
    CmsUser,
    ErrorResponse,
    MediaResponse,
    ObjectDraft,
    ObjectResponse,
    ObjectsResponse,
    RevisionsResponse,
    SuccessResponse,
    UsersResponse,
    WebhooksResponse,
)
from .request_builder import MultipartFile, build_request
from .transport import AiohttpTransport, HttpResponse, HttpTransport
from .types import ImagePromptBody, JSONType, QueryFilter

T = TypeVar("T")

log = logging.getLogger(__name__)

FileInput = Union[str, Path, bytes, BinaryIO]


class CosmicClient:
    """Client for one Cosmic bucket.

    Configuration is fixed at construction, so one client can serve
    concurrent calls. Use it as an async context manager, or call
    :meth:`close` when done, to release the HTTP session.

    Example:
        async with CosmicClient("my-bucket", "read-key", "write-key") as cosmic:
            episodes = await cosmic.find(
                "episode",
                {"metadata.regular_hosts.id": {"$in": ["host-1", "host-2"]}},
                depth=2,
            )
    """

    def __init__(
        self,
        bucket_slug: str,
        read_key: str,
        write_key: Optional[str] = None,
        *,
        base_url: str = DEFAULT_BASE_URL,
        workers_url: str = DEFAULT_WORKERS_URL,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[HttpTransport] = None,
    ):
        """Initialize the client.

        Args:
            bucket_slug: Bucket to operate on
            read_key: Bucket read key
            write_key: Bucket write key (only needed for mutations)
            base_url: Base URL of the API host
            workers_url: Base URL of the workers host (uploads and AI)
            timeout: Total request timeout in seconds for the default transport
            transport: Custom HTTP transport

        Raises:
            ConfigurationError: If bucket slug or read key is empty
        """
        self.config = ClientConfig(
            bucket_slug=bucket_slug,
            read_key=read_key,
            write_key=write_key,
            base_url=base_url.rstrip("/"),
            workers_url=workers_url.rstrip("/"),
            timeout=timeout,
        )
        self.transport: HttpTransport = transport or AiohttpTransport(timeout=timeout)

    @classmethod
    def from_config(cls, config: ClientConfig, transport: Optional[HttpTransport] = None) -> "CosmicClient":
        return cls(
            config.bucket_slug,
            config.read_key,
            config.write_key,
            base_url=config.base_url,
            workers_url=config.workers_url,
            timeout=config.timeout,
            transport=transport,
        )

    @classmethod
    def from_env(cls, path: Optional[Union[str, Path]] = None) -> "CosmicClient":
        return cls.from_config(ClientConfig.from_env(path))

    @property
    def bucket_slug(self) -> str:
        return self.config.bucket_slug

    @property
    def timeout(self) -> float:
        return self.config.timeout

    async def close(self) -> None:
        await self.transport.close()

    async def __aenter__(self) -> "CosmicClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    # -------------------------
    # Pipeline
    # -------------------------
    async def _execute(
        self,
        operation: Operation,
        decode: Optional[Callable[[Any], T]],
        *,
        multipart: Optional[List[MultipartFile]] = None,
        **params: Any,
    ) -> T:
        endpoint = resolve(
            operation,
            bucket=self.config.bucket_slug,
            read_key=self.config.read_key,
            write_key=self.config.write_key,
            workers_url=self.config.workers_url,
            **params,
        )
        request = build_request(endpoint, self.config.base_url, multipart=multipart)
        log.info(f"{operation.value}: {request.method} {redact_url(request.url)}")

        response = await self.transport.send(request)
        if not response.ok:
            raise self._remote_error(response)

        if decode is None:
            try:
                return response.body.decode("utf-8")  # type: ignore[return-value]
            except UnicodeDecodeError as e:
                raise DecodingError(f"{operation.value}: response is not valid UTF-8", response.body) from e

        try:
            data = json.loads(response.body) if response.body.strip() else None
        except ValueError as e:
            log.debug(f"{operation.value}: unparseable body, first 200 chars: {response.body[:200]!r}")
            raise DecodingError(f"{operation.value}: response is not valid JSON: {e}", response.body) from e

        try:
            return decode(data)
        except (ValueDecodingError, TypeError, KeyError) as e:
            log.debug(f"{operation.value}: decoding failed for body {response.body[:200]!r}")
            raise DecodingError(f"{operation.value}: unexpected response shape: {e}", response.body) from e

    @staticmethod
    def _remote_error(response: HttpResponse) -> RemoteError:
        """Map an error response to RemoteError.

        Envelope fields win when present; the error type falls back to the
        HTTP status when the envelope's ``type`` is missing or unrecognised.
        """
        status = response.status
        if not response.body.strip():
            return RemoteError(status, RemoteErrorType.from_status(status), f"HTTP {status}", raw_body=response.body)
        try:
            envelope = ErrorResponse.from_json(json.loads(response.body))
        except ValueError as e:
            log.warning(f"Error response (HTTP {status}) has no usable envelope ({e}): {response.body[:200]!r}")
            return RemoteError(status, RemoteErrorType.from_status(status), f"HTTP {status}", raw_body=response.body)

        if envelope.status is not None:
            status = envelope.status
        error_type = envelope.type if envelope.type is not None else RemoteErrorType.from_status(status)
        return RemoteError(status, error_type, envelope.message, envelope.details, raw_body=response.body)

    # -------------------------
    # Objects
    # -------------------------
    async def find(
        self,
        object_type: str,
        query: Optional[QueryFilter] = None,
        *,
        props: Optional[str] = None,
        limit: Optional[int] = None,
        skip: Optional[int] = None,
        sort: Union[None, Sorting, str] = None,
        status: Union[None, Status, str] = None,
        depth: Optional[int] = None,
    ) -> ObjectsResponse:
        """List objects of a type, optionally filtered.

        Args:
            object_type: Object type slug
            query: Filter fields merged into the ``query`` JSON, e.g.
                   ``{"metadata.price": {"$gte": 10, "$lte": 20}}``
            props: Comma separated response fields. Every returned object
                   must still carry ``title``; a projection that leaves it
                   out fails decoding with DecodingError
            limit: Page size (server default when omitted)
            skip: Number of objects to skip
            sort: Sort order
            status: Publication status filter
            depth: Relationship expansion depth

        Returns:
            ObjectsResponse
        """
        return await self._execute(
            Operation.FIND, ObjectsResponse.from_json,
            object_type=object_type, query=query, props=props, limit=limit,
            skip=skip, sort=sort, status=status, depth=depth,
        )

    async def find_regex(
        self,
        object_type: str,
        field: str,
        pattern: str,
        *,
        options: Optional[str] = "i",
        props: Optional[str] = None,
        limit: Optional[int] = None,
        skip: Optional[int] = None,
        sort: Union[None, Sorting, str] = None,
        status: Union[None, Status, str] = None,
        depth: Optional[int] = None,
    ) -> ObjectsResponse:
        """List objects whose ``field`` matches a regular expression."""
        return await self._execute(
            Operation.FIND_REGEX, ObjectsResponse.from_json,
            object_type=object_type, query=regex_filter(field, pattern, options),
            props=props, limit=limit, skip=skip, sort=sort, status=status, depth=depth,
        )

    async def find_one(
        self,
        id: Optional[str],
        *,
        props: Optional[str] = None,
        status: Union[None, Status, str] = None,
        depth: Optional[int] = None,
    ) -> ObjectResponse:
        return await self._execute(
            Operation.FIND_ONE, ObjectResponse.from_json,
            id=id, props=props, status=status, depth=depth,
        )

    async def insert_one(
        self,
        object_type: str,
        title: str,
        *,
        slug: Optional[str] = None,
        content: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
        status: Union[None, Status, str] = None,
        publish_at: Optional[str] = None,
        unpublish_at: Optional[str] = None,
        locale: Optional[str] = None,
        thumbnail: Optional[str] = None,
    ) -> SuccessResponse:
        """Create an object.

        If ``publish_at`` or ``unpublish_at`` is given the object is created
        as a draft regardless of ``status``.
        """
        draft = ObjectDraft(
            title=title, type=object_type, slug=slug, content=content, metadata=metadata,
            status=status, publish_at=publish_at, unpublish_at=unpublish_at,
            locale=locale, thumbnail=thumbnail,
        )
        return await self.insert_draft(draft)

    async def insert_draft(self, draft: ObjectDraft) -> SuccessResponse:
        return await self._execute(Operation.INSERT_ONE, SuccessResponse.from_json, body=dict(draft.to_body()))

    async def update_one(
        self,
        id: Optional[str],
        *,
        object_type: Optional[str] = None,
        title: Optional[str] = None,
        slug: Optional[str] = None,
        content: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
        status: Union[None, Status, str] = None,
        publish_at: Optional[str] = None,
        unpublish_at: Optional[str] = None,
        locale: Optional[str] = None,
        thumbnail: Optional[str] = None,
    ) -> SuccessResponse:
        """Patch an object; only the fields given are sent."""
        draft = ObjectDraft(
            title=title, type=object_type, slug=slug, content=content, metadata=metadata,
            status=status, publish_at=publish_at, unpublish_at=unpublish_at,
            locale=locale, thumbnail=thumbnail,
        )
        return await self._execute(Operation.UPDATE_ONE, SuccessResponse.from_json, id=id, body=dict(draft.to_body()))

    async def delete_one(self, id: Optional[str]) -> SuccessResponse:
        return await self._execute(Operation.DELETE_ONE, SuccessResponse.from_json, id=id)

    async def get_object_revisions(self, id: Optional[str]) -> RevisionsResponse:
        return await self._execute(Operation.GET_OBJECT_REVISIONS, RevisionsResponse.from_json, id=id)

    async def search_objects(self, query: str) -> ObjectsResponse:
        """Full-text search across the bucket's objects."""
        return await self._execute(Operation.SEARCH_OBJECTS, ObjectsResponse.from_json, body={"query": query})

    # -------------------------
    # Media
    # -------------------------
    async def get_media(
        self,
        *,
        limit: Optional[int] = None,
        skip: Optional[int] = None,
        props: Optional[str] = None,
    ) -> MediaResponse:
        return await self._execute(Operation.GET_MEDIA, MediaResponse.from_json, limit=limit, skip=skip, props=props)

    async def upload_media(
        self,
        file: FileInput,
        *,
        filename: Optional[str] = None,
        folder: Optional[str] = None,
        metadata: Optional[Dict[str, JSONType]] = None,
    ) -> CmsMedia:
        """Upload a file to the bucket's media library.

        Args:
            file: Path, raw bytes or a binary file object
            filename: Name to upload under (required for raw bytes)
            folder: Optional media folder
            metadata: Optional metadata stored with the media

        Returns:
            The created CmsMedia

        Raises:
            ValueError: If no filename can be determined
        """
        # file reads happen off the event loop
        loop = asyncio.get_running_loop()
        content, name = await loop.run_in_executor(None, _read_file, file, filename)
        parts = [MultipartFile("media", content, filename=name, content_type=guess_mime_type(name))]
        if folder:
            parts.append(MultipartFile("folder", folder))
        if metadata is not None:
            parts.append(MultipartFile(
                "metadata",
                json.dumps(metadata, separators=(",", ":")),
                content_type="application/json",
            ))
        log.info(f"Uploading {name} ({len(content)} bytes)")
        return await self._execute(Operation.UPLOAD_MEDIA, CmsMedia.from_json, multipart=parts)

    async def get_media_object(self, id: Optional[str]) -> CmsMedia:
        return await self._execute(Operation.GET_MEDIA_OBJECT, CmsMedia.from_json, id=id)

    async def delete_media(self, id: Optional[str]) -> SuccessResponse:
        return await self._execute(Operation.DELETE_MEDIA, SuccessResponse.from_json, id=id)

    # -------------------------
    # Bucket
    # -------------------------
    async def get_bucket(self) -> BucketSettings:
        return await self._execute(Operation.GET_BUCKET, BucketSettings.from_json)

    async def update_bucket_settings(self, settings: Union[BucketSettings, Dict[str, Any]]) -> SuccessResponse:
        body = settings.to_json() if isinstance(settings, BucketSettings) else dict(settings)
        return await self._execute(Operation.UPDATE_BUCKET_SETTINGS, SuccessResponse.from_json, body=body)

    async def test_connection(self) -> str:
        """Fetch the bucket and return the raw response text."""
        return await self._execute(Operation.TEST_CONNECTION, None)

    # -------------------------
    # Users
    # -------------------------
    async def get_users(self) -> UsersResponse:
        return await self._execute(Operation.GET_USERS, UsersResponse.from_json)

    async def get_user(self, id: Optional[str]) -> CmsUser:
        return await self._execute(Operation.GET_USER, CmsUser.from_json, id=id)

    async def add_user(self, email: str, role: str) -> CmsUser:
        return await self._execute(Operation.ADD_USER, CmsUser.from_json, body={"email": email, "role": role})

    async def delete_user(self, id: Optional[str]) -> SuccessResponse:
        return await self._execute(Operation.DELETE_USER, SuccessResponse.from_json, id=id)

    # -------------------------
    # Webhooks
    # -------------------------
    async def get_webhooks(self) -> WebhooksResponse:
        return await self._execute(Operation.GET_WEBHOOKS, WebhooksResponse.from_json)

    async def add_webhook(self, event: str, endpoint: str) -> SuccessResponse:
        return await self._execute(
            Operation.ADD_WEBHOOK, SuccessResponse.from_json, body={"event": event, "endpoint": endpoint}
        )

    async def delete_webhook(self, id: Optional[str]) -> SuccessResponse:
        return await self._execute(Operation.DELETE_WEBHOOK, SuccessResponse.from_json, id=id)

    # -------------------------
    # AI
    # -------------------------
    async def generate_text(self, prompt: str) -> AITextResponse:
        return await self._execute(Operation.GENERATE_TEXT, AITextResponse.from_json, body={"prompt": prompt})

    async def generate_image(
        self,
        prompt: str,
        size: str = "1024x1024",
        quality: str = "standard",
        style: str = "vivid",
    ) -> AIImageResponse:
        body: ImagePromptBody = {"prompt": prompt, "size": size, "quality": quality, "style": style}
        return await self._execute(Operation.GENERATE_IMAGE, AIImageResponse.from_json, body=dict(body))


def _read_file(file: FileInput, filename: Optional[str]) -> Tuple[bytes, str]:
    if isinstance(file, (str, Path)):
        path = Path(file)
        return path.read_bytes(), filename or path.name
    if isinstance(file, (bytes, bytearray)):
        if not filename:
            raise ValueError("filename is required when uploading raw bytes")
        return bytes(file), filename
    content = file.read()
    name = filename or Path(getattr(file, "name", "") or "").name
    if not name:
        raise ValueError("filename is required for file objects without a name")
    return content, name
