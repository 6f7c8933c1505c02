"""Turns a resolved endpoint into a transport-ready request."""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Union
from urllib.parse import quote, urlencode, urlsplit

from .endpoints import ResolvedEndpoint
from .helpers import is_absolute_url, is_blank

JSON_CONTENT_TYPE = "application/json"


@dataclass(frozen=True)
class MultipartFile:
    """One section of a multipart body."""

    name: str
    content: Union[bytes, str]
    filename: Optional[str] = None
    content_type: Optional[str] = None


@dataclass(frozen=True)
class PreparedRequest:
    method: str
    url: str
    headers: Dict[str, str] = field(default_factory=dict)
    body: Optional[bytes] = None
    multipart: Optional[List[MultipartFile]] = None

    @property
    def query(self) -> str:
        return urlsplit(self.url).query


def encode_query(params: Mapping[str, Optional[str]]) -> str:
    """Encode query parameters, dropping absent and blank values."""
    kept = [(k, v) for k, v in params.items() if not is_blank(v)]
    return urlencode(kept, quote_via=quote)


def join_url(base_url: str, path: str) -> str:
    if is_absolute_url(path):
        return path
    return base_url.rstrip("/") + "/" + path.lstrip("/")


def build_request(
    endpoint: ResolvedEndpoint,
    base_url: str,
    multipart: Optional[List[MultipartFile]] = None,
) -> PreparedRequest:
    """Compose URL, headers and encoded body for ``endpoint``.

    Absolute paths (workers host) are used verbatim, anything else is joined
    onto ``base_url``. GET requests never carry an Authorization header.
    """
    url = join_url(base_url, endpoint.path)
    query = encode_query(endpoint.params)
    if query:
        url = f"{url}{'&' if '?' in url else '?'}{query}"

    headers = {"Accept": JSON_CONTENT_TYPE}
    if endpoint.authorization and endpoint.method != "GET":
        headers["Authorization"] = f"Bearer {endpoint.authorization}"

    body: Optional[bytes] = None
    # multipart Content-Type (with boundary) is set by the transport
    if not multipart:
        headers["Content-Type"] = JSON_CONTENT_TYPE
        if endpoint.body is not None:
            body = json.dumps(endpoint.body, separators=(",", ":"), ensure_ascii=False).encode("utf-8")

    return PreparedRequest(
        method=endpoint.method,
        url=url,
        headers=headers,
        body=body,
        multipart=list(multipart) if multipart else None,
    )
