"""Activate configured services: one execution mode per descriptor."""

import threading
from collections.abc import Callable, Iterable
from typing import Any

from loguru import logger

from archival_access.clock import SystemClock
from archival_access.config import Settings
from archival_access.errors import ConfigurationError
from archival_access.models.archival import MetadataRecord
from archival_access.models.item import AccessDecision, IdentityContext, Item
from archival_access.protocols import SchedulerProtocol, TaskQueueProtocol
from archival_access.services.descriptor import (
    Capability,
    RunAs,
    ServiceContext,
    ServiceDescriptor,
)
from archival_access.services.registry import resolve_binding

_REQUEST_CAPABILITIES = (
    Capability.HAS_ACCESS,
    Capability.GET_METADATA,
    Capability.GET_AUTH_TEXTS,
)


def is_primary_instance(instance: int | None) -> bool:
    """Only the first process of a scaled deployment runs bootstrap and scheduled services.

    This is a convention, not a lock: two processes both configured as instance 0
    will both run them.
    """
    return instance is None or instance == 0


class HookRegistry:
    """Request-time hooks registered by request-server services.

    For each capability the first registered provider (in configuration order)
    answers.
    """

    def __init__(self) -> None:
        self._hooks: list[tuple[str, Capability, Callable[..., Any]]] = []

    def register(self, service_name: str, capability: Capability, hook: Callable[..., Any]) -> None:
        self._hooks.append((service_name, capability, hook))

    def provider(self, capability: Capability) -> Callable[..., Any] | None:
        for _name, registered, hook in self._hooks:
            if registered is capability:
                return hook
        return None

    @property
    def service_names(self) -> list[str]:
        return list(dict.fromkeys(name for name, _capability, _hook in self._hooks))

    def has_access(self, item: Item, identity: IdentityContext | None = None) -> AccessDecision:
        """Decide access with the configured provider; open when none is configured."""
        hook = self.provider(Capability.HAS_ACCESS)
        if hook is None:
            return AccessDecision.open()
        return hook(item, identity or IdentityContext())  # type: ignore[no-any-return]

    def get_metadata(self, identifier: str) -> list[MetadataRecord]:
        hook = self.provider(Capability.GET_METADATA)
        if hook is None:
            return []
        return hook(identifier)  # type: ignore[no-any-return]

    def get_auth_texts(self, item: Item) -> dict[str, dict[str, str]]:
        hook = self.provider(Capability.GET_AUTH_TEXTS)
        if hook is None:
            return {}
        return hook(item)  # type: ignore[no-any-return]


class Runtime:
    """Binds institution hooks into their execution modes."""

    def __init__(
        self,
        context: ServiceContext,
        *,
        hooks: HookRegistry | None = None,
        task_queue: TaskQueueProtocol | None = None,
        scheduler: SchedulerProtocol | None = None,
    ) -> None:
        self.context = context
        self.hooks = hooks or HookRegistry()
        self.task_queue = task_queue if task_queue is not None else context.task_queue
        self.scheduler = scheduler
        self.activated: list[ServiceDescriptor] = []

    def activate(self, descriptors: Iterable[ServiceDescriptor]) -> list[str]:
        """Activate each descriptor in its mode.

        Returns:
            Names of the services that were activated (gated ones are skipped).

        Raises:
            ConfigurationError: If a descriptor cannot be bound.
        """
        names: list[str] = []
        for descriptor in descriptors:
            if self._activate_one(descriptor):
                self.activated.append(descriptor)
                names.append(descriptor.name)
        return names

    def _bind(self, descriptor: ServiceDescriptor, capability: Capability) -> Callable[..., Any]:
        factory = resolve_binding(descriptor.bindings[capability])
        return factory(self.context)  # type: ignore[no-any-return]

    def _activate_one(self, descriptor: ServiceDescriptor) -> bool:
        descriptor.validate()
        primary = is_primary_instance(self.context.settings.instance)

        if descriptor.run_as is RunAs.REQUEST_SERVER:
            for capability in _REQUEST_CAPABILITIES:
                if capability in descriptor.bindings:
                    hook = self._bind(descriptor, capability)
                    self.hooks.register(descriptor.name, capability, hook)
            logger.info("Request hooks registered for {}", descriptor.name)
            return True

        if descriptor.run_as is RunAs.TASK_WORKER:
            if self.task_queue is None:
                msg = f"Task worker {descriptor.name!r} needs a task queue"
                raise ConfigurationError(msg)
            handler = self._bind(descriptor, Capability.TASK_HANDLER)
            self.task_queue.subscribe(str(descriptor.task_type), handler)
            logger.info("Worker initialized for {} ({})", descriptor.name, descriptor.task_type)
            return True

        # Bootstrap and scheduled services run once per deployment, not per process.
        if not primary:
            logger.info(
                "Skipping {} service {} on instance {}",
                descriptor.run_as.value, descriptor.name, self.context.settings.instance,
            )
            return False

        if descriptor.run_as is RunAs.BOOTSTRAP:
            job = self._bind(descriptor, Capability.TASK_HANDLER)
            job()
            logger.info("Bootstrap completed for {}", descriptor.name)
            return True

        if self.scheduler is None:
            msg = f"Scheduled service {descriptor.name!r} needs a scheduler"
            raise ConfigurationError(msg)
        job = self._bind(descriptor, Capability.TASK_HANDLER)
        self.scheduler.schedule(str(descriptor.cron), job)
        logger.info("Cron {} scheduled for {}", descriptor.cron, descriptor.name)
        return True

    @property
    def has_workers(self) -> bool:
        return any(d.run_as is RunAs.TASK_WORKER for d in self.activated)

    @property
    def has_scheduled(self) -> bool:
        return any(d.run_as is RunAs.SCHEDULED for d in self.activated)


def build_context(settings: Settings) -> ServiceContext:
    """Wire the production collaborators for the given settings."""
    from archival_access.item_store import ElasticItemStore
    from archival_access.task_queue import RedisTaskQueue
    from archival_access.tree_store import FileTreeStore

    return ServiceContext(
        settings=settings,
        item_store=ElasticItemStore(settings.elasticsearch_url),
        tree_store=FileTreeStore(settings.data_path),
        task_queue=RedisTaskQueue(settings.redis_url),
        clock=SystemClock(),
    )


def serve(runtime: Runtime, descriptors: Iterable[ServiceDescriptor]) -> None:
    """Activate services, then block on the task queue and scheduler if needed."""
    runtime.activate(descriptors)

    scheduler_thread = None
    if runtime.has_scheduled and runtime.scheduler is not None:
        scheduler_thread = threading.Thread(
            target=runtime.scheduler.run_forever, name="scheduler", daemon=True
        )
        scheduler_thread.start()

    if runtime.has_workers and runtime.task_queue is not None:
        runtime.task_queue.run_forever()
    elif scheduler_thread is not None:
        scheduler_thread.join()
    else:
        logger.info("No workers or schedules to run; request hooks are registered")
