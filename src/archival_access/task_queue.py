"""Redis-backed task queue.

Each task type has its own list (``tasks:<type>``). Producers LPUSH JSON
payloads, the worker loop BRPOPs across all subscribed types.
"""

import json
from typing import Any

import redis
from loguru import logger

from archival_access.errors import UnavailableError
from archival_access.protocols import TaskHandler

KEY_PREFIX = "tasks:"


class RedisTaskQueue:
    """Deliver (type, payload) tasks to subscribed handlers."""

    def __init__(self, url: str | None = None, *, client: redis.Redis | None = None) -> None:
        if client is None:
            if url is None:
                msg = "RedisTaskQueue needs a url or a client"
                raise ValueError(msg)
            client = redis.Redis.from_url(url, decode_responses=True)
        self.redis = client
        self._handlers: dict[str, list[TaskHandler]] = {}
        self.running = False

    @property
    def task_types(self) -> list[str]:
        return list(self._handlers)

    def subscribe(self, task_type: str, handler: TaskHandler) -> None:
        self._handlers.setdefault(task_type, []).append(handler)
        logger.debug("Subscribed handler to {}{}", KEY_PREFIX, task_type)

    def publish(self, task_type: str, payload: dict[str, Any]) -> None:
        try:
            self.redis.lpush(KEY_PREFIX + task_type, json.dumps(payload, sort_keys=True))
        except redis.RedisError as e:
            msg = f"Cannot publish {task_type!r} task: {e}"
            raise UnavailableError(msg) from e

    def run_once(self, timeout: int = 5) -> bool:
        """Wait up to ``timeout`` seconds for one task and deliver it.

        Returns:
            True if a task was received.
        """
        if not self._handlers:
            return False

        try:
            result = self.redis.brpop([KEY_PREFIX + t for t in self._handlers], timeout=timeout)
        except redis.RedisError as e:
            msg = f"Cannot receive tasks: {e}"
            raise UnavailableError(msg) from e
        if result is None:
            return False

        key, raw = result
        if isinstance(key, bytes):
            key = key.decode("utf-8")
        task_type = key.removeprefix(KEY_PREFIX)

        try:
            payload = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Dropping malformed {} task: {!r}", task_type, raw[:80])
            return True

        for handler in self._handlers.get(task_type, []):
            try:
                handler(payload)
            except Exception:
                logger.exception("Task {} failed: {!r}", task_type, payload)
        return True

    def run_forever(self, timeout: int = 5) -> None:
        self.running = True
        logger.info("Waiting for tasks: {}", ", ".join(self.task_types))
        while self.running:
            self.run_once(timeout)

    def stop(self) -> None:
        self.running = False
