"""Default access policy: internal network sees all, configured embargoes apply."""

from collections.abc import Callable

from archival_access.core.access.identity import internal_ip_rule
from archival_access.core.access.policy import AccessPolicyEngine
from archival_access.core.access.temporal import ConfiguredEmbargoes
from archival_access.models.item import AccessDecision, IdentityContext, Item
from archival_access.services.descriptor import ServiceContext


def access_hook(context: ServiceContext) -> Callable[[Item, IdentityContext], AccessDecision]:
    settings = context.settings
    engine = AccessPolicyEngine(
        embargoes=ConfiguredEmbargoes(settings.embargo_dates),
        pre_rules=[internal_ip_rule(settings.internal_ip_addresses)],
        clock=context.clock,
    )
    return engine.evaluate
