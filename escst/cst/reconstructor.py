"""
The Source Reconstructor re-emits source text from a CST by replaying each
node's slot schedule: extras for every label, fixed semantic tokens, leaf text
and children, all in schedule order.
"""

from typing import Any, List

from escst.config.config import BOUNDARY_LABELS, WRAPPED_FIELD
from escst.exceptions import MalformedCst

from .nodes import CstNode, VirtualNode
from .slots import Child, Items, Label, Leaf, Text, Virtual
from .strategies import Strategy


class SourceReconstructor:
    def __init__(self, strategy: Strategy):
        self.strategy = strategy

    def reconstruct(self, root: CstNode) -> str:
        parts: List[str] = []
        self._emit(root, wrap=True, parts=parts)
        return "".join(parts)

    def _emit(self, node: Any, wrap: bool, parts: List[str]):
        if isinstance(node, VirtualNode):
            owner_type = node.anchor_role
            value_of = lambda name: node.wrapped if name == WRAPPED_FIELD else None
        elif isinstance(node, CstNode):
            owner_type = node.type
            value_of = lambda name: node.node_fields.get(name)
        else:
            raise MalformedCst(node_type=type(node).__name__, details="only CST and virtual nodes can be reconstructed.")

        record = node.extras
        if record.strategy != self.strategy.name:
            raise MalformedCst(node_type=owner_type, details=f"built with the {record.strategy} strategy, reconstructed with {self.strategy.name}.")

        if wrap:
            parts.extend(token.raw for token in record.get(BOUNDARY_LABELS[0]))

        for slot in self.strategy.slot_schedule(owner_type):
            if isinstance(slot, Label):
                parts.extend(token.raw for token in record.get(slot.name))
            elif isinstance(slot, Text):
                parts.append(slot.value)
            elif isinstance(slot, Leaf):
                parts.append(str(value_of(slot.field)))
            elif isinstance(slot, (Child, Virtual)):
                child = value_of(slot.field)
                if child is not None:
                    self._emit(child, getattr(slot, "wrap", True), parts)
            elif isinstance(slot, Items):
                for index, item in enumerate(value_of(slot.field) or []):
                    if index and slot.separator:
                        parts.append(slot.separator)
                    self._emit(item, slot.wrap, parts)

        if wrap:
            parts.extend(token.raw for token in record.get(BOUNDARY_LABELS[1]))


def reconstruct_source(root: CstNode, strategy: Strategy) -> str:
    """Re-emits the exact source text of `root`."""
    return SourceReconstructor(strategy).reconstruct(root)
