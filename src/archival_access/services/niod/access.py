"""NIOD access policy: collections open up on the access date of their root item."""

from collections.abc import Callable

from archival_access.core.access.policy import AccessPolicyEngine
from archival_access.core.access.temporal import RootItemEmbargo
from archival_access.models.item import AccessDecision, IdentityContext, Item
from archival_access.services.descriptor import ServiceContext


def access_hook(context: ServiceContext) -> Callable[[Item, IdentityContext], AccessDecision]:
    engine = AccessPolicyEngine(
        embargoes=RootItemEmbargo(context.item_store, namespace="niod"),
        clock=context.clock,
    )
    return engine.evaluate
