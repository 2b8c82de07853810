"""
Static configuration data for the ESTree CST toolkit.
This includes the versioned grammar table, virtual-node anchor roles
and strategy names.
"""

from enum import Enum

# --- External Grammar ---
# The standard AST shape, modelled as data so traversal code never hard-codes
# per-type logic. Field order is the canonical field order of each node type.

GRAMMAR_VERSION = "estree-es5-functions/1"


class FieldKind(Enum):
    NODE = "node"
    OPTIONAL_NODE = "optional_node"
    NODE_LIST = "node_list"
    SCALAR = "scalar"


GRAMMAR = {
    "Program": {"body": FieldKind.NODE_LIST},
    "FunctionDeclaration": {"id": FieldKind.NODE, "params": FieldKind.NODE_LIST, "body": FieldKind.NODE},
    "BlockStatement": {"body": FieldKind.NODE_LIST},
    "ReturnStatement": {"argument": FieldKind.OPTIONAL_NODE},
    "ExpressionStatement": {"expression": FieldKind.NODE},
    "EmptyStatement": {},
    "CallExpression": {"callee": FieldKind.NODE, "arguments": FieldKind.NODE_LIST},
    "Identifier": {"name": FieldKind.SCALAR},
    "Literal": {"value": FieldKind.SCALAR, "raw": FieldKind.SCALAR},
}

# --- Virtual Node Anchor Roles ---
# Each role names the field a virtual node replaces and the arity of the child
# it wraps. Projection checks virtual nodes against this table.


class WrappedArity(Enum):
    LIST = "list"
    NODE = "node"
    NONE = "none"


ANCHOR_ROLES = {
    "paramList": {"owner": "FunctionDeclaration", "field": "params", "arity": WrappedArity.LIST},
    "argumentList": {"owner": "CallExpression", "field": "arguments", "arity": WrappedArity.LIST},
}

# The field name a virtual node's schedule uses to refer to its wrapped child.
WRAPPED_FIELD = "wrapped"

# The labels every wrapped node receives around its own schedule.
BOUNDARY_LABELS = ("before", "after")

# --- Strategies ---

VIRTUAL_NODE = "virtual-node"
EXTENDED_LABEL = "extended-label"
DEFAULT_STRATEGY = VIRTUAL_NODE
