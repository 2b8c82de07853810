"""
Utility functions for the ESTree CST toolkit, including terminal coloring,
and a JSON artifact serializer for trees, records and tokens.
"""

import json
from enum import Enum

from pydantic import BaseModel

from escst.cst.extras import ExtrasRecord
from escst.cst.nodes import CstNode, VirtualNode


class TerminalColors:
    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    CYAN = "\033[96m"
    RESET = "\033[0m"


class CstArtifactEncoder(json.JSONEncoder):
    def default(self, o):
        # CST nodes hold a plain-class record, so they are serialised by hand.
        if isinstance(o, CstNode):
            data = {"type": o.type, **o.node_fields}
            if not o.extras.is_empty():
                data["extras"] = o.extras
            if o.span is not None:
                data["span"] = o.span
            return data
        if isinstance(o, VirtualNode):
            data = {"type": "VirtualNode", "anchorRole": o.anchor_role, "wrapped": o.wrapped}
            if not o.extras.is_empty():
                data["extras"] = o.extras
            return data
        if isinstance(o, ExtrasRecord):
            return o.to_dict()
        if isinstance(o, BaseModel):
            return o.model_dump(mode="json")
        if isinstance(o, Enum):
            return o.value
        if isinstance(o, (set, frozenset, tuple)):
            return list(o)
        return super().default(o)
