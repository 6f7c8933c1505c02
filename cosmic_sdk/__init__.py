"""Cosmic SDK Package.

This package provides an async Python client for the Cosmic headless CMS
REST API (v3). It includes a client (CosmicClient) covering objects, media,
bucket settings, users, webhooks and AI generation, a callback wrapper
(CallbackClient), and typed models for the service's resources.

Example Usage:
    from cosmic_sdk import CosmicClient

    async with CosmicClient("my-bucket", "read-key", "write-key") as cosmic:
        # Structured query filters
        response = await cosmic.find(
            "episode",
            {"metadata.broadcast_date": {"$gte": "2024-01-01"}},
            limit=10,
            depth=2,
        )
        for obj in response.objects:
            host = obj.metafield_value("host")
            print(obj.title, host.as_string() if host else None)

        # Scheduled content is always created as a draft
        await cosmic.insert_one(
            "posts",
            "Holiday Announcement",
            publish_at="2024-12-25T00:00:00.000Z",
        )
"""

from ._version import __version__, __version_info__
from .exceptions import (
    CosmicException,
    ConfigurationError,
    TransportError,
    DecodingError,
    ValueDecodingError,
    MissingIdentifierError,
    MissingWriteKeyError,
    RemoteError,
    RemoteErrorType,
)
from .values import DynamicValue, ValueKind
from .metadata import (
    Metafield,
    MetafieldOption,
    MetafieldType,
    ObjectMetadata,
    RepeaterField,
)
from .models import (
    AIImageResponse,
    AITextResponse,
    BucketSettings,
    CmsMedia,
    CmsObject,
    CmsUser,
    CmsWebhook,
    ErrorResponse,
    MediaResponse,
    ObjectDraft,
    ObjectResponse,
    ObjectRevision,
    ObjectsResponse,
    RevisionsResponse,
    SuccessResponse,
    UsersResponse,
    WebhooksResponse,
)
from .endpoints import Operation, Sorting, Status, build_query_json, resolve
from .config import ClientConfig
from .transport import AiohttpTransport, HttpResponse, HttpTransport
from .client import CosmicClient
from .callbacks import CallbackClient, Outcome

__all__ = [
    # Version
    '__version__',
    '__version_info__',

    # Main classes
    'CosmicClient',
    'CallbackClient',
    'ClientConfig',
    'Outcome',

    # Transport
    'AiohttpTransport',
    'HttpResponse',
    'HttpTransport',

    # Exceptions
    'CosmicException',
    'ConfigurationError',
    'TransportError',
    'DecodingError',
    'ValueDecodingError',
    'MissingIdentifierError',
    'MissingWriteKeyError',
    'RemoteError',
    'RemoteErrorType',

    # Values and metadata
    'DynamicValue',
    'ValueKind',
    'Metafield',
    'MetafieldOption',
    'MetafieldType',
    'ObjectMetadata',
    'RepeaterField',

    # Models
    'AIImageResponse',
    'AITextResponse',
    'BucketSettings',
    'CmsMedia',
    'CmsObject',
    'CmsUser',
    'CmsWebhook',
    'ErrorResponse',
    'MediaResponse',
    'ObjectDraft',
    'ObjectResponse',
    'ObjectRevision',
    'ObjectsResponse',
    'RevisionsResponse',
    'SuccessResponse',
    'UsersResponse',
    'WebhooksResponse',

    # Endpoints
    'Operation',
    'Sorting',
    'Status',
    'build_query_json',
    'resolve',
]
