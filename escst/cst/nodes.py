"""
Concrete syntax tree nodes.

A `CstNode` mirrors one AST node: same `type`, same fields (children replaced by
their CST counterparts) and the same span, plus one `ExtrasRecord`. A
`VirtualNode` exists only under the virtual-node strategy; it stands in for an
AST field (for example the parameter list) so extras have something to attach
to, and it carries no semantic meaning of its own.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict

from escst.parser.core.classes import Span

from .extras import ExtrasRecord


class CstNode(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    type: str
    node_fields: Dict[str, Any]
    extras: ExtrasRecord
    span: Optional[Span] = None


class VirtualNode(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    anchor_role: str
    # A list of CST nodes, a single CST node, or None for a pure placeholder.
    wrapped: Any = None
    extras: ExtrasRecord

    @property
    def type(self) -> str:
        return self.anchor_role
