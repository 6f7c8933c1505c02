import asyncio
from typing import List

import pytest

from cosmic_sdk import CallbackClient, CosmicClient, Outcome
from cosmic_sdk.exceptions import MissingIdentifierError, RemoteError
from cosmic_sdk.request_builder import PreparedRequest
from cosmic_sdk.transport import HttpResponse, HttpTransport


class FakeTransport:
    """Transport that replays canned responses and records requests."""

    def __init__(self, *responses: HttpResponse):
        self.responses = list(responses)
        self.sent: List[PreparedRequest] = []
        self.closed = False

    async def send(self, request: PreparedRequest) -> HttpResponse:
        self.sent.append(request)
        return self.responses.pop(0)

    async def close(self) -> None:
        self.closed = True


def test_fake_transport_satisfies_protocol():
    assert isinstance(FakeTransport(), HttpTransport)


@pytest.mark.asyncio
async def test_callback_receives_success():
    transport = FakeTransport(HttpResponse(200, b'{"objects":[{"title":"A"}],"total":1}'))
    client = CosmicClient("test-bucket", "rk", transport=transport)
    outcomes: List[Outcome] = []

    task = CallbackClient(client).find("posts", limit=5, callback=outcomes.append)
    await task

    assert len(outcomes) == 1
    assert outcomes[0].ok
    assert outcomes[0].unwrap().total == 1
    assert "limit=5" in transport.sent[0].url


@pytest.mark.asyncio
async def test_callback_receives_remote_failure():
    transport = FakeTransport(HttpResponse(401, b'{"status":401,"type":"INVALID_CREDENTIALS","message":"bad key"}'))
    client = CosmicClient("test-bucket", "rk", transport=transport)
    outcomes: List[Outcome] = []

    await CallbackClient(client).find_one("abc", callback=outcomes.append)

    assert not outcomes[0].ok
    assert isinstance(outcomes[0].error, RemoteError)
    with pytest.raises(RemoteError):
        outcomes[0].unwrap()


@pytest.mark.asyncio
async def test_callback_receives_local_validation_failure():
    transport = FakeTransport()
    client = CosmicClient("test-bucket", "rk", transport=transport)
    done = asyncio.Event()
    outcomes: List[Outcome] = []

    def on_done(outcome):
        outcomes.append(outcome)
        done.set()

    CallbackClient(client).delete_media(None, callback=on_done)
    await asyncio.wait_for(done.wait(), timeout=1)

    assert isinstance(outcomes[0].error, MissingIdentifierError)
    assert transport.sent == []


def test_unknown_operation_is_attribute_error():
    client = CosmicClient("test-bucket", "rk", transport=FakeTransport())
    with pytest.raises(AttributeError):
        CallbackClient(client).no_such_operation


@pytest.mark.asyncio
async def test_custom_transport_closed_with_client():
    transport = FakeTransport()
    async with CosmicClient("test-bucket", "rk", transport=transport):
        pass
    assert transport.closed


@pytest.mark.asyncio
async def test_non_sdk_failure_still_reaches_callback():
    transport = FakeTransport()
    client = CosmicClient("test-bucket", "rk", "wk", transport=transport)
    outcomes: List[Outcome] = []

    # raw bytes without a filename raise ValueError inside the operation
    task = CallbackClient(client).upload_media(b"data", callback=outcomes.append)
    await task

    assert len(outcomes) == 1
    assert isinstance(outcomes[0].error, ValueError)
    assert task.exception() is None
    assert transport.sent == []


@pytest.mark.asyncio
async def test_scheduled_task_is_referenced_until_done():
    from cosmic_sdk import callbacks

    transport = FakeTransport(HttpResponse(200, b'{"users":[]}'))
    client = CosmicClient("test-bucket", "rk", transport=transport)
    outcomes: List[Outcome] = []

    task = CallbackClient(client).get_users(callback=outcomes.append)
    assert task in callbacks._pending
    await task
    await asyncio.sleep(0)
    assert task not in callbacks._pending
    assert outcomes[0].ok
