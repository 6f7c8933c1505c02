from typing import Any, Dict

import pytest

from cosmic_sdk.endpoints import Status
from cosmic_sdk.exceptions import RemoteErrorType, ValueDecodingError
from cosmic_sdk.models import (
    AIImageResponse,
    BucketSettings,
    CmsMedia,
    CmsObject,
    CmsUser,
    ErrorResponse,
    ObjectDraft,
    ObjectResponse,
    ObjectsResponse,
    RevisionsResponse,
    SuccessResponse,
    WebhooksResponse,
)


def _object(**extra: Any) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "id": "abc",
        "slug": "hello-world",
        "title": "Hello World",
        "type": "posts",
        "status": "published",
    }
    data.update(extra)
    return data


def test_object_from_json_basic() -> None:
    data = _object(content="<p>Hi</p>", metadata={"views": 3})
    obj = CmsObject.from_json(data)
    assert obj.id == "abc"
    assert obj.title == "Hello World"
    assert obj.metafield_value("views").as_int() == 3
    assert obj.metadata_dict["views"] == 3
    assert obj.raw == data


def test_numeric_timestamps_become_strings() -> None:
    obj = CmsObject.from_json(_object(published_at=1700000000, modified_at="2024-01-01T00:00:00.000Z"))
    assert obj.published_at == "1700000000"
    assert obj.modified_at == "2024-01-01T00:00:00.000Z"
    assert CmsObject.from_json(_object(publish_at=1700000000.0)).publish_at == "1700000000"


def test_object_requires_title() -> None:
    data = _object()
    del data["title"]
    with pytest.raises(ValueDecodingError):
        CmsObject.from_json(data)


def test_object_rejects_wrong_field_type() -> None:
    with pytest.raises(ValueDecodingError):
        CmsObject.from_json(_object(slug=12))


def test_object_without_metadata() -> None:
    obj = CmsObject.from_json(_object())
    assert obj.metadata is None
    assert obj.metafield_value("anything") is None
    assert obj.metadata_dict is None


def test_object_to_json_writes_metadata_key_for_legacy_payload() -> None:
    obj = CmsObject.from_json(_object(metafields={"a": "b"}))
    encoded = obj.to_json()
    assert encoded["metadata"] == {"a": "b"}
    assert "metafields" not in encoded
    assert encoded["title"] == "Hello World"


def test_draft_scheduled_forces_draft_status() -> None:
    draft = ObjectDraft(
        title="Holiday Announcement",
        type="posts",
        status=Status.PUBLISHED,
        publish_at="2024-12-25T00:00:00.000Z",
    )
    body = draft.to_body()
    assert body["status"] == "draft"
    assert body["publish_at"] == "2024-12-25T00:00:00.000Z"

    only_unpublish = ObjectDraft(title="T", type="posts", status="published", unpublish_at="2025-01-01")
    assert only_unpublish.to_body()["status"] == "draft"


def test_draft_unscheduled_keeps_status_and_skips_blanks() -> None:
    body = ObjectDraft(title="T", type="posts", status=Status.PUBLISHED, slug="", content=None).to_body()
    assert body == {"type": "posts", "title": "T", "status": "published"}


def test_draft_metadata_encoded_as_plain_json() -> None:
    body = ObjectDraft(title="T", type="posts", metadata={"price": 10, "tags": ["a"], "on": True}).to_body()
    assert body["metadata"] == {"price": 10, "tags": ["a"], "on": True}


def test_objects_response() -> None:
    resp = ObjectsResponse.from_json({"objects": [_object(), _object(id="def")], "total": 2, "limit": 10})
    assert [o.id for o in resp.objects] == ["abc", "def"]
    assert resp.total == 2
    assert resp.limit == 10
    assert resp.skip is None
    assert ObjectsResponse.from_json({}).objects == []


def test_object_response_requires_object() -> None:
    assert ObjectResponse.from_json({"object": _object()}).object.slug == "hello-world"
    with pytest.raises(ValueDecodingError):
        ObjectResponse.from_json({"objects": []})


def test_success_response_variants() -> None:
    assert SuccessResponse.from_json(None).message is None
    resp = SuccessResponse.from_json({"message": "ok", "object": _object()})
    assert resp.message == "ok"
    assert resp.object.id == "abc"


def test_revisions_response() -> None:
    resp = RevisionsResponse.from_json({"revisions": [{"id": "r1", "title": "v1", "created_at": 1}], "total": 1})
    assert resp.revisions[0].created_at == "1"


def test_media_accepts_wrapped_and_flat() -> None:
    flat = {"id": "m1", "name": "a.png", "url": "https://cdn/a.png", "width": 10, "metadata": {"alt": "x"}}
    assert CmsMedia.from_json(flat).width == 10
    wrapped = CmsMedia.from_json({"media": flat})
    assert wrapped.id == "m1"
    assert wrapped.metadata["alt"].as_string() == "x"
    with pytest.raises(ValueDecodingError):
        CmsMedia.from_json({"id": "m1", "name": "a.png"})


def test_bucket_settings_roundtrip_skips_none() -> None:
    settings = BucketSettings.from_json({"bucket": {"title": "Blog", "website": "https://x"}})
    assert settings.to_json() == {"title": "Blog", "website": "https://x"}


def test_user_wrapped() -> None:
    user = CmsUser.from_json({"user": {"id": "u1", "email": "a@b.c", "role": "editor"}})
    assert user.role == "editor"


def test_webhooks_response() -> None:
    resp = WebhooksResponse.from_json({"webhooks": [{"id": "w1", "event": "object.created", "endpoint": "https://h"}]})
    assert resp.webhooks[0].event == "object.created"


def test_ai_image_response() -> None:
    resp = AIImageResponse.from_json({
        "media": {"id": "m1", "name": "gen.png", "url": "https://cdn/gen.png"},
        "revised_prompt": "a cat",
    })
    assert resp.media.name == "gen.png"
    assert resp.revised_prompt == "a cat"


def test_error_response_unknown_type() -> None:
    err = ErrorResponse.from_json({"status": 418, "type": "TEAPOT", "message": "short and stout"})
    assert err.type is None
    assert err.status == 418
    assert ErrorResponse.from_json({"type": None, "message": "m"}).type is None
    assert ErrorResponse.from_json({"type": "UNKNOWN_ERROR", "message": "m"}).type is RemoteErrorType.UNKNOWN
    with pytest.raises(ValueDecodingError):
        ErrorResponse.from_json({"status": 500})
    assert ErrorResponse.from_json(
        {"status": 404, "type": "NOT_FOUND", "message": "gone"}
    ).type is RemoteErrorType.NOT_FOUND
