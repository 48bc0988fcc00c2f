"""IISH access policy.

Restrictions come from the finding aid of the item's collection. Requests from
the internal network see everything; holders of a valid access token get
reduced-size images of otherwise closed material.
"""

from collections.abc import Callable

from archival_access.core.access.identity import credential_tier_rule, internal_ip_rule
from archival_access.core.access.policy import AccessPolicyEngine
from archival_access.core.access.restrictions import TreeRestrictionPolicy
from archival_access.core.access.temporal import ConfiguredEmbargoes
from archival_access.models.item import AccessDecision, IdentityContext, Item
from archival_access.services.descriptor import ServiceContext


def access_hook(context: ServiceContext) -> Callable[[Item, IdentityContext], AccessDecision]:
    settings = context.settings
    engine = AccessPolicyEngine(
        restrictions=TreeRestrictionPolicy(context.tree_store),
        embargoes=ConfiguredEmbargoes(settings.embargo_dates),
        pre_rules=[internal_ip_rule(settings.internal_ip_addresses)],
        on_closed=[credential_tier_rule(settings.access_tokens, settings.tier_max_size)],
        clock=context.clock,
    )
    return engine.evaluate
