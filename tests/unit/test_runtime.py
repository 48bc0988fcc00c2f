"""Tests for service activation, instance gating and serving."""

import dataclasses

import pytest

from archival_access.errors import ConfigurationError
from archival_access.models.item import AccessState, Item
from archival_access.services.descriptor import Capability, ServiceContext
from archival_access.services.registry import load_descriptors
from archival_access.services.runtime import HookRegistry, Runtime, is_primary_instance, serve
from tests.unit.fakes import FakeScheduler, FakeTaskQueue

IMAGE = Item(id="img", collection_id="A.1.1", type="image")


def _on_instance(context: ServiceContext, instance: int | None) -> ServiceContext:
    settings = dataclasses.replace(context.settings, instance=instance)
    return dataclasses.replace(context, settings=settings)


@pytest.mark.parametrize(("instance", "primary"), [(None, True), (0, True), (1, False), (3, False)])
def test_is_primary_instance(instance: int | None, primary: bool) -> None:
    assert is_primary_instance(instance) is primary


def test_empty_registry_falls_back() -> None:
    hooks = HookRegistry()
    assert hooks.has_access(IMAGE).state is AccessState.OPEN
    assert hooks.get_metadata("A.1.1") == []
    assert hooks.get_auth_texts(IMAGE) == {}


def test_first_registered_provider_wins() -> None:
    hooks = HookRegistry()
    hooks.register("first", Capability.GET_METADATA, lambda identifier: ["first"])
    hooks.register("second", Capability.GET_METADATA, lambda identifier: ["second"])
    assert hooks.get_metadata("A") == ["first"]
    assert hooks.service_names == ["first", "second"]


def test_request_server_services_register_hooks(context: ServiceContext) -> None:
    runtime = Runtime(context)
    names = runtime.activate(load_descriptors(["default-access", "iish-metadata"]))

    assert names == ["default-access", "iish-metadata"]
    assert runtime.hooks.service_names == names
    records = runtime.hooks.get_metadata("A.1.1")
    assert [r.title for r in records] == ["Fonds A", "No title", "Letter"]
    assert runtime.hooks.has_access(IMAGE).state is AccessState.OPEN


def test_task_worker_subscribes_to_its_task_type(context: ServiceContext) -> None:
    runtime = Runtime(context)
    runtime.activate(load_descriptors(["iish-metadata-worker"]))

    queue = context.task_queue
    assert isinstance(queue, FakeTaskQueue)
    [result] = queue.deliver("metadata", {"collection_id": "A", "identifiers": ["A.1.2"]})
    assert isinstance(result, dict)
    assert result["A.1.2"][-1].title == "Postcard"
    assert runtime.has_workers


def test_task_worker_needs_a_queue(context: ServiceContext) -> None:
    runtime = Runtime(dataclasses.replace(context, task_queue=None))
    with pytest.raises(ConfigurationError, match="task queue"):
        runtime.activate(load_descriptors(["iish-metadata-worker"]))


@pytest.mark.parametrize("instance", [None, 0])
def test_bootstrap_runs_on_primary_instance(context: ServiceContext, instance: int | None) -> None:
    context = _on_instance(context, instance)
    runtime = Runtime(context)

    names = runtime.activate(load_descriptors(["iish-metadata-bootstrap"]))

    assert names == ["iish-metadata-bootstrap"]
    assert isinstance(context.task_queue, FakeTaskQueue)
    assert context.task_queue.published == [("metadata", {"collection_id": "A"})]


def test_bootstrap_and_scheduled_skipped_on_other_instances(context: ServiceContext) -> None:
    context = _on_instance(context, 1)
    scheduler = FakeScheduler()
    runtime = Runtime(context, scheduler=scheduler)

    names = runtime.activate(
        load_descriptors(["iish-metadata-bootstrap", "iish-metadata-update", "iish-metadata"])
    )

    assert names == ["iish-metadata"]
    assert scheduler.jobs == []
    assert isinstance(context.task_queue, FakeTaskQueue)
    assert context.task_queue.published == []


def test_scheduled_service_registers_cron_job(context: ServiceContext) -> None:
    scheduler = FakeScheduler()
    runtime = Runtime(context, scheduler=scheduler)

    runtime.activate(load_descriptors(["iish-metadata-update"]))

    assert [expression for expression, _job in scheduler.jobs] == ["0 4 * * *"]
    scheduler.tick()
    assert isinstance(context.task_queue, FakeTaskQueue)
    assert context.task_queue.published == [("metadata", {"collection_id": "A"})]
    assert runtime.has_scheduled


def test_scheduled_service_needs_a_scheduler(context: ServiceContext) -> None:
    with pytest.raises(ConfigurationError, match="scheduler"):
        Runtime(context).activate(load_descriptors(["iish-metadata-update"]))


def test_serve_blocks_on_queue_when_workers_are_active(context: ServiceContext) -> None:
    scheduler = FakeScheduler()
    runtime = Runtime(context, scheduler=scheduler)

    serve(runtime, load_descriptors(["iish-metadata-worker", "iish-metadata-update"]))

    assert isinstance(context.task_queue, FakeTaskQueue)
    assert context.task_queue.ran_forever
    # The scheduler thread may not have been scheduled yet, but it was started.
    assert runtime.has_scheduled


def test_serve_runs_scheduler_without_workers(context: ServiceContext) -> None:
    scheduler = FakeScheduler()
    runtime = Runtime(context, scheduler=scheduler)

    serve(runtime, load_descriptors(["iish-metadata-update"]))

    assert scheduler.ran_forever
    assert isinstance(context.task_queue, FakeTaskQueue)
    assert not context.task_queue.ran_forever


def test_serve_with_only_request_hooks_returns(context: ServiceContext) -> None:
    runtime = Runtime(context)
    serve(runtime, load_descriptors(["default-access"]))
    assert isinstance(context.task_queue, FakeTaskQueue)
    assert not context.task_queue.ran_forever
