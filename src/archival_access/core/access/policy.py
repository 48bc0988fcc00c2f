"""The access policy engine: may an item's resource be disclosed, and how?"""

from collections.abc import Sequence
from datetime import datetime
from typing import Protocol

from archival_access.clock import SystemClock
from archival_access.core.access.identity import AccessRule
from archival_access.models.item import (
    AccessDecision,
    AccessState,
    IdentityContext,
    Item,
    Restriction,
)
from archival_access.protocols import ClockProtocol


class RestrictionPolicy(Protocol):
    def classify(self, item: Item) -> Restriction: ...


class TemporalPolicy(Protocol):
    def embargo_date(self, item: Item) -> datetime | None: ...


class AccessPolicyEngine:
    """Evaluates access decisions for items.

    Rules, first match decides:

    0. institution rules (``pre_rules``), in order;
    1. items without a binary payload are open;
    2. with an embargo date, items are open from that date on;
    3. ... and closed before it;
    4. otherwise the static classification decides: closed and restricted items
       are closed, open and date-gated items are open (a date-gated item with no
       embargo date has nothing to gate against).

    A closed outcome of rules 3-4 is offered to ``on_closed`` rules, which may
    soften it (e.g. a tiered decision for holders of a valid credential).

    The engine holds no mutable state; evaluations are independent.
    """

    def __init__(
        self,
        *,
        restrictions: RestrictionPolicy | None = None,
        embargoes: TemporalPolicy | None = None,
        pre_rules: Sequence[AccessRule] = (),
        on_closed: Sequence[AccessRule] = (),
        clock: ClockProtocol | None = None,
    ) -> None:
        self.restrictions = restrictions
        self.embargoes = embargoes
        self.pre_rules = tuple(pre_rules)
        self.on_closed = tuple(on_closed)
        self.clock = clock or SystemClock()

    def evaluate(self, item: Item, identity: IdentityContext | None = None) -> AccessDecision:
        """Decide access to ``item`` for the given requester."""
        if identity is None:
            identity = IdentityContext()

        for rule in self.pre_rules:
            decision = rule(item, identity)
            if decision is not None:
                return decision

        decision = self._evaluate_base(item)
        if decision.state is AccessState.CLOSED:
            for rule in self.on_closed:
                softened = rule(item, identity)
                if softened is not None:
                    return softened
        return decision

    def _evaluate_base(self, item: Item) -> AccessDecision:
        if not item.has_payload:
            return AccessDecision.open()

        embargo = self.embargoes.embargo_date(item) if self.embargoes is not None else None
        if embargo is not None:
            if self.clock.now() >= embargo:
                return AccessDecision.open()
            return AccessDecision.closed()

        restriction = (
            self.restrictions.classify(item) if self.restrictions is not None else Restriction.OPEN
        )
        if restriction in (Restriction.CLOSED, Restriction.RESTRICTED):
            return AccessDecision.closed()
        return AccessDecision.open()
