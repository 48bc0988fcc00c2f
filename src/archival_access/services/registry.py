"""The registry of known services, keyed by name."""

import importlib
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from archival_access.errors import ConfigurationError
from archival_access.services.descriptor import Capability, RunAs, ServiceDescriptor

_PKG = "archival_access.services"

BUILTIN_SERVICES: dict[str, ServiceDescriptor] = {
    d.name: d
    for d in (
        ServiceDescriptor(
            name="default-access",
            run_as=RunAs.REQUEST_SERVER,
            bindings={Capability.HAS_ACCESS: f"{_PKG}.default.access:access_hook"},
        ),
        ServiceDescriptor(
            name="default-auth-texts",
            run_as=RunAs.REQUEST_SERVER,
            bindings={Capability.GET_AUTH_TEXTS: f"{_PKG}.default.auth_texts:auth_texts_hook"},
        ),
        ServiceDescriptor(
            name="iish-access",
            run_as=RunAs.REQUEST_SERVER,
            bindings={Capability.HAS_ACCESS: f"{_PKG}.iish.access:access_hook"},
        ),
        ServiceDescriptor(
            name="iish-metadata",
            run_as=RunAs.REQUEST_SERVER,
            bindings={Capability.GET_METADATA: f"{_PKG}.iish.metadata:metadata_hook"},
        ),
        ServiceDescriptor(
            name="iish-metadata-worker",
            run_as=RunAs.TASK_WORKER,
            task_type="metadata",
            bindings={Capability.TASK_HANDLER: f"{_PKG}.iish.tasks:metadata_task_handler"},
        ),
        ServiceDescriptor(
            name="iish-metadata-bootstrap",
            run_as=RunAs.BOOTSTRAP,
            bindings={Capability.TASK_HANDLER: f"{_PKG}.iish.tasks:enqueue_all_job"},
        ),
        ServiceDescriptor(
            name="iish-metadata-update",
            run_as=RunAs.SCHEDULED,
            cron="0 4 * * *",
            bindings={Capability.TASK_HANDLER: f"{_PKG}.iish.tasks:enqueue_all_job"},
        ),
        ServiceDescriptor(
            name="niod-access",
            run_as=RunAs.REQUEST_SERVER,
            bindings={Capability.HAS_ACCESS: f"{_PKG}.niod.access:access_hook"},
        ),
    )
}


def load_descriptors(
    names: Iterable[str],
    available: Mapping[str, ServiceDescriptor] | None = None,
) -> list[ServiceDescriptor]:
    """Resolve configured service names to descriptors, keeping their order.

    Raises:
        ConfigurationError: If a name is unknown or its descriptor is incomplete.
    """
    if available is None:
        available = BUILTIN_SERVICES

    descriptors: list[ServiceDescriptor] = []
    for name in names:
        descriptor = available.get(name)
        if descriptor is None:
            msg = f"Unknown service {name!r}; known services: {sorted(available)!r}"
            raise ConfigurationError(msg)
        descriptor.validate()
        descriptors.append(descriptor)
    return descriptors


def resolve_binding(path: str) -> Callable[..., Any]:
    """Import a ``"module:function"`` binding.

    Raises:
        ConfigurationError: If the module or attribute cannot be found.
    """
    module_name, sep, attr = path.partition(":")
    if not sep or not module_name or not attr:
        msg = f"Binding must look like 'module:function', got {path!r}"
        raise ConfigurationError(msg)
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        msg = f"Cannot import binding module {module_name!r}: {e}"
        raise ConfigurationError(msg) from e
    try:
        factory = getattr(module, attr)
    except AttributeError:
        msg = f"Binding module {module_name!r} has no attribute {attr!r}"
        raise ConfigurationError(msg) from None
    if not callable(factory):
        msg = f"Binding {path!r} is not callable"
        raise ConfigurationError(msg)
    return factory  # type: ignore[no-any-return]
