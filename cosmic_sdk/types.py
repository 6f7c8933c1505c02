"""Shared typing helpers used across the cosmic_sdk package.

This module centralizes JSON-like typings and commonly used typed dictionaries so
other modules in the package can import concrete types rather than using
unstructured Any in many places.
"""
from __future__ import annotations

from typing import Dict, List, Mapping, Optional, TypedDict, Union


# Recursive JSON-ish type used for payloads / returned JSON values
JSONType = Union[Dict[str, "JSONType"], List["JSONType"], str, int, float, bool, None]

# Caller-supplied query filter: dotted field path -> scalar or operator map
QueryFilter = Mapping[str, JSONType]

# Query parameters after resolution (values are already stringified)
QueryParams = Dict[str, Optional[str]]


class ObjectBody(TypedDict, total=False):
    """Encoded body of an object create/update request.

    Fields are optional because blank values are dropped before sending.
    """
    type: str
    title: str
    slug: str
    content: str
    metadata: Dict[str, JSONType]
    status: str
    publish_at: str
    unpublish_at: str
    locale: str
    thumbnail: str


class ImagePromptBody(TypedDict):
    prompt: str
    size: str
    quality: str
    style: str
