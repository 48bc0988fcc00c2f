"""Tests for the Redis task queue, against a mocked client."""

import json
from typing import Any
from unittest.mock import MagicMock

import pytest
import redis

from archival_access.errors import UnavailableError
from archival_access.task_queue import RedisTaskQueue


@pytest.fixture
def client() -> MagicMock:
    return MagicMock(spec=redis.Redis)


def test_needs_url_or_client() -> None:
    with pytest.raises(ValueError, match="url or a client"):
        RedisTaskQueue()


def test_publish_pushes_json(client: MagicMock) -> None:
    queue = RedisTaskQueue(client=client)
    queue.publish("metadata", {"collection_id": "A", "b": 1})
    client.lpush.assert_called_once_with("tasks:metadata", '{"b": 1, "collection_id": "A"}')


def test_publish_failure_is_unavailable(client: MagicMock) -> None:
    client.lpush.side_effect = redis.ConnectionError("down")
    with pytest.raises(UnavailableError, match="down"):
        RedisTaskQueue(client=client).publish("metadata", {})


def test_run_once_without_subscriptions(client: MagicMock) -> None:
    assert not RedisTaskQueue(client=client).run_once()
    client.brpop.assert_not_called()


def test_run_once_delivers_to_every_handler(client: MagicMock) -> None:
    received: list[tuple[str, dict[str, Any]]] = []
    queue = RedisTaskQueue(client=client)
    queue.subscribe("metadata", lambda p: received.append(("first", p)))
    queue.subscribe("metadata", lambda p: received.append(("second", p)))
    queue.subscribe("other", lambda p: received.append(("other", p)))
    client.brpop.return_value = (b"tasks:metadata", json.dumps({"collection_id": "A"}))

    assert queue.run_once(timeout=1)

    keys = client.brpop.call_args.args[0]
    assert keys == ["tasks:metadata", "tasks:other"]
    assert received == [("first", {"collection_id": "A"}), ("second", {"collection_id": "A"})]


def test_run_once_timeout(client: MagicMock) -> None:
    queue = RedisTaskQueue(client=client)
    queue.subscribe("metadata", lambda p: None)
    client.brpop.return_value = None
    assert not queue.run_once()


def test_malformed_payload_is_dropped(client: MagicMock) -> None:
    handler = MagicMock()
    queue = RedisTaskQueue(client=client)
    queue.subscribe("metadata", handler)
    client.brpop.return_value = ("tasks:metadata", "{oops")

    assert queue.run_once()
    handler.assert_not_called()


def test_failing_handler_does_not_stop_others(client: MagicMock) -> None:
    after = MagicMock()
    queue = RedisTaskQueue(client=client)
    queue.subscribe("metadata", MagicMock(side_effect=RuntimeError("boom")))
    queue.subscribe("metadata", after)
    client.brpop.return_value = ("tasks:metadata", "{}")

    assert queue.run_once()
    after.assert_called_once_with({})


def test_receive_failure_is_unavailable(client: MagicMock) -> None:
    queue = RedisTaskQueue(client=client)
    queue.subscribe("metadata", lambda p: None)
    client.brpop.side_effect = redis.ConnectionError("gone")
    with pytest.raises(UnavailableError):
        queue.run_once()


def test_run_forever_until_stopped(client: MagicMock) -> None:
    queue = RedisTaskQueue(client=client)
    seen: list[dict[str, Any]] = []

    def handler(payload: dict[str, Any]) -> None:
        seen.append(payload)
        queue.stop()

    queue.subscribe("metadata", handler)
    client.brpop.return_value = ("tasks:metadata", '{"n": 1}')

    queue.run_forever(timeout=1)

    assert seen == [{"n": 1}]
    assert not queue.running
