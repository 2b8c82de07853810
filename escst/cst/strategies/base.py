import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, FrozenSet, Iterable, List, Sequence, Tuple

from escst.config.config import ANCHOR_ROLES, BOUNDARY_LABELS, GRAMMAR, GRAMMAR_VERSION, WRAPPED_FIELD
from escst.exceptions import IncompleteSlotSchedule, InvalidLabel

from ..anchor_resolver import Anchor, AnchorResolver, Gap
from ..extras import ExtrasRecord
from ..slots import Slot, Virtual, covered_fields, labels_of

logger = logging.getLogger(__name__)


class Strategy(ABC):
    """
    A pluggable attachment strategy.

    A strategy publishes, for every node type of the grammar (and every virtual
    anchor role it uses), a slot schedule and a label vocabulary. The schedule is
    the single source of truth for where extras may appear and in which order
    they are replayed. Schedules are validated once, when the strategy object is
    constructed, so configuration holes surface at import time instead of in the
    middle of a traversal.
    """

    name: str = ""

    def __init__(self):
        self._schedules: Dict[str, Tuple[Slot, ...]] = {node_type: tuple(schedule) for node_type, schedule in self.schedules().items()}
        self._vocabularies: Dict[str, FrozenSet[str]] = {node_type: frozenset(self.build_vocabulary(node_type)) for node_type in self._schedules}
        self.resolver = AnchorResolver(self)
        self.validate()

    # --- Extension points ---

    @abstractmethod
    def schedules(self) -> Dict[str, Sequence[Slot]]:
        """Slot schedule per node type and per anchor role."""

    @abstractmethod
    def build_vocabulary(self, node_type: str) -> Iterable[str]:
        """Labels an extras record owned by `node_type` may use."""

    # --- Public interface ---

    def node_types(self) -> Tuple[str, ...]:
        return tuple(self._schedules)

    def anchor_roles(self) -> Tuple[str, ...]:
        return tuple(node_type for node_type in self._schedules if node_type in ANCHOR_ROLES)

    def slot_schedule(self, node_type: str) -> Tuple[Slot, ...]:
        try:
            return self._schedules[node_type]
        except KeyError:
            raise IncompleteSlotSchedule(node_type=node_type, strategy=self.name, details="is missing: no schedule is published for this type.") from None

    def vocabulary(self, node_type: str) -> FrozenSet[str]:
        try:
            return self._vocabularies[node_type]
        except KeyError:
            raise IncompleteSlotSchedule(node_type=node_type, strategy=self.name, details="is missing: no vocabulary is published for this type.") from None

    def new_record(self, owner_type: str) -> ExtrasRecord:
        return ExtrasRecord(owner_type, self.vocabulary(owner_type), self.name)

    def gaps(self, node_type: str, sparse: bool = True) -> List[Gap]:
        return self.resolver.gaps(node_type, sparse)

    def resolve_anchor(self, node_type: str, gap: int, sparse: bool = True) -> Anchor:
        """Maps a (node type, gap index) pair to the anchor that owns extras found there."""
        return self.resolver.resolve_position(node_type, gap, sparse)

    def label_table(self) -> Dict[str, Any]:
        """The published data contract: labels per node type and the virtual anchor roles."""
        node_types = {}
        for node_type, schedule in self._schedules.items():
            vocabulary = self._vocabularies[node_type]
            # Schedule order first, then whatever the vocabulary allows beyond it.
            ordered = dict.fromkeys([BOUNDARY_LABELS[0], *labels_of(schedule), BOUNDARY_LABELS[1], *sorted(vocabulary)])
            entry: Dict[str, Any] = {"labels": [label for label in ordered if label in vocabulary]}
            roles = [{"field": slot.field, "role": slot.role} for slot in schedule if isinstance(slot, Virtual)]
            if roles:
                entry["virtualNodes"] = roles
            node_types[node_type] = entry

        return {
            "strategy": self.name,
            "grammarVersion": GRAMMAR_VERSION,
            "nodeTypes": node_types,
            "anchorRoles": {role: {"owner": ANCHOR_ROLES[role]["owner"], "field": ANCHOR_ROLES[role]["field"], "wraps": ANCHOR_ROLES[role]["arity"].value} for role in self.anchor_roles()},
        }

    # --- Validation ---

    def validate(self):
        for node_type, fields in GRAMMAR.items():
            schedule = self.slot_schedule(node_type)
            self._check_fields(node_type, schedule, tuple(fields))

            for slot in schedule:
                if not isinstance(slot, Virtual):
                    continue
                role = ANCHOR_ROLES.get(slot.role)
                if role is None or role["owner"] != node_type or role["field"] != slot.field:
                    raise IncompleteSlotSchedule(node_type=node_type, strategy=self.name, details=f"uses anchor role '{slot.role}' for field '{slot.field}', which the anchor role table does not define.")
                self._check_fields(slot.role, self.slot_schedule(slot.role), (WRAPPED_FIELD,))

        for node_type, schedule in self._schedules.items():
            if node_type not in GRAMMAR and node_type not in ANCHOR_ROLES:
                raise IncompleteSlotSchedule(node_type=node_type, strategy=self.name, details="is published for a type the grammar does not define.")
            vocabulary = self._vocabularies[node_type]
            for label in (*BOUNDARY_LABELS, *labels_of(schedule)):
                if label not in vocabulary:
                    raise InvalidLabel(label=label, node_type=node_type, strategy=self.name, valid=", ".join(sorted(vocabulary)))

        logger.debug("Validated %s strategy: %d schedule(s)", self.name, len(self._schedules))

    def _check_fields(self, node_type: str, schedule: Tuple[Slot, ...], fields: Tuple[str, ...]):
        covered = covered_fields(schedule)
        missing = [name for name in fields if name not in covered]
        if missing:
            raise IncompleteSlotSchedule(node_type=node_type, strategy=self.name, details=f"omits field(s) {', '.join(missing)}.")
        unknown = [name for name in covered if name not in fields]
        if unknown:
            raise IncompleteSlotSchedule(node_type=node_type, strategy=self.name, details=f"refers to unknown field(s) {', '.join(unknown)}.")
        duplicated = sorted({name for name in covered if covered.count(name) > 1})
        if duplicated:
            raise IncompleteSlotSchedule(node_type=node_type, strategy=self.name, details=f"covers field(s) {', '.join(duplicated)} more than once.")
