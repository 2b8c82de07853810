"""
The Anchor Resolver decides which record (and which label of it) owns a run of
extras.

Between two consecutive semantic tokens the schedule walk reaches zero or more
label slots: labels of the node being built, and the `before`/`after` labels of
wrapped children and virtual nodes. Those are the candidate anchors for the gap.
The tie-break is the same for every node type and both strategies: the
candidate reached last, i.e. the one lexically later in the canonical field
order, owns the whole gap. A gap with no candidate is a hole in the strategy's
grammar extension and raises `UnresolvableAnchor`.

The builder feeds the resolver live candidates; `gaps`/`resolve_position`
compute the same candidates statically from a schedule, which is how anchor
completeness is checked per node type.
"""

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List, Optional, Sequence, Tuple, Union

from escst.config.config import GRAMMAR, FieldKind
from escst.exceptions import CstError, ErrorCode, UnresolvableAnchor
from escst.parser.core.tokens import Token

from .extras import ExtrasRecord
from .slots import Child, Items, Label, Leaf, Text, Virtual

if TYPE_CHECKING:
    from .strategies.base import Strategy

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Anchor:
    """An attachment point: the owner of a record and one label of it.

    `owner` is the owner's type or anchor role for live anchors, and a relation
    path such as `FunctionDeclaration.id` for anchors computed from a schedule.
    """

    owner: str
    label: str
    record: Optional[ExtrasRecord] = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class Gap:
    left: str
    right: str
    candidates: Tuple[Anchor, ...]

    def describe(self) -> str:
        return f"between {self.left} and {self.right}"


# A flattened schedule: anchors interleaved with descriptions of semantic tokens.
_Event = Union[Anchor, str]


class AnchorResolver:
    def __init__(self, strategy: "Strategy"):
        self.strategy = strategy

    def choose(self, candidates: Sequence[Anchor], node_type: str, gap: str, extras: Sequence[Token]) -> Anchor:
        """Applies the tie-break to the candidates collected for one gap."""
        if not candidates:
            raise UnresolvableAnchor(
                span=extras[0].span if extras else None,
                node_type=node_type,
                gap=gap,
                strategy=self.strategy.name,
            )

        anchor = candidates[-1]
        logger.debug("%d extra(s) %s -> %s.%s", len(extras), gap, anchor.owner, anchor.label)
        return anchor

    # --- Static resolution ---

    def gaps(self, node_type: str, sparse: bool = True) -> List[Gap]:
        """
        Lists the internal gaps of a node type, left to right.

        With `sparse=True` lists are empty and optional children absent, which is
        the shape where extras have the fewest anchors to choose from. With
        `sparse=False` every list holds two items and every child is present.
        """
        events = self._flatten(node_type, sparse)

        gaps: List[Gap] = []
        left: Optional[str] = None
        pending: List[Anchor] = []
        for event in events:
            if isinstance(event, Anchor):
                pending.append(event)
                continue
            if left is not None:
                gaps.append(Gap(left=left, right=event, candidates=tuple(pending)))
            left, pending = event, []
        return gaps

    def resolve_position(self, node_type: str, gap: int, sparse: bool = True) -> Anchor:
        gaps = self.gaps(node_type, sparse)
        if not 0 <= gap < len(gaps):
            raise CstError(ErrorCode.UNKNOWN_GAP, node_type=node_type, gap=gap, strategy=self.strategy.name, count=len(gaps))

        position = gaps[gap]
        return self.choose(position.candidates, node_type, position.describe(), ())

    def _flatten(self, node_type: str, sparse: bool) -> List[_Event]:
        fields = GRAMMAR.get(node_type, {})
        events: List[_Event] = []
        for slot in self.strategy.slot_schedule(node_type):
            if isinstance(slot, Label):
                events.append(Anchor(node_type, slot.name))
            elif isinstance(slot, Text):
                events.append(repr(slot.value))
            elif isinstance(slot, Leaf):
                events.append(f"<{node_type}.{slot.field}>")
            elif isinstance(slot, Child):
                if sparse and fields.get(slot.field) is FieldKind.OPTIONAL_NODE:
                    continue
                events.extend(self._child_events(f"{node_type}.{slot.field}", slot.wrap))
            elif isinstance(slot, Virtual):
                events.extend(self._child_events(slot.role, wrap=True))
            elif isinstance(slot, Items):
                for index in range(0 if sparse else 2):
                    if index and slot.separator:
                        events.append(repr(slot.separator))
                    events.extend(self._child_events(f"{node_type}.{slot.field}[{index}]", slot.wrap))
        return events

    @staticmethod
    def _child_events(owner: str, wrap: bool) -> List[_Event]:
        if not wrap:
            return [f"<{owner}>"]
        return [Anchor(owner, "before"), f"<{owner}>", Anchor(owner, "after")]
