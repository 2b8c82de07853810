"""
The AST Projector strips a CST back to the plain AST: every extras record is
dropped and every virtual node is replaced by the child it wraps. The result is
equal to the AST the builder started from.
"""

from typing import Any

from escst.config.config import ANCHOR_ROLES, GRAMMAR, FieldKind, WrappedArity
from escst.exceptions import MalformedCst
from escst.parser.core.classes import NODE_CLASSES, ASTNode

from .nodes import CstNode, VirtualNode


def project_ast(node: Any) -> ASTNode:
    """Projects a CST (or an AST, which is returned unchanged) to a plain AST."""
    if isinstance(node, ASTNode):
        return node
    if isinstance(node, VirtualNode):
        raise MalformedCst(node_type=node.anchor_role, details="a virtual node cannot stand where a real node is required.")
    if not isinstance(node, CstNode):
        raise MalformedCst(node_type=type(node).__name__, details="expected a CST node.")

    fields = GRAMMAR.get(node.type)
    if fields is None or node.type not in NODE_CLASSES:
        raise MalformedCst(span=node.span, node_type=node.type, details="the grammar does not define this node type.")

    values = {}
    for name, kind in fields.items():
        if name not in node.node_fields:
            raise MalformedCst(span=node.span, node_type=node.type, details=f"field '{name}' is missing.")
        values[name] = _project_field(node, name, kind, node.node_fields[name])

    return NODE_CLASSES[node.type](span=node.span, **values)


def _project_field(owner: CstNode, name: str, kind: FieldKind, value: Any) -> Any:
    if isinstance(value, VirtualNode):
        value = _unwrap(owner, name, value)

    if kind is FieldKind.SCALAR:
        return value
    if kind is FieldKind.NODE_LIST:
        if not isinstance(value, list):
            raise MalformedCst(span=owner.span, node_type=owner.type, details=f"field '{name}' must hold a list.")
        projected = []
        for item in value:
            if isinstance(item, VirtualNode):
                # A sibling placeholder: promote what it wraps, or drop it.
                if item.wrapped is None:
                    continue
                item = _unwrap(owner, name, item)
            projected.append(project_ast(item))
        return projected
    if value is None:
        if kind is FieldKind.OPTIONAL_NODE:
            return None
        raise MalformedCst(span=owner.span, node_type=owner.type, details=f"required field '{name}' is empty.")
    return project_ast(value)


def _unwrap(owner: CstNode, name: str, virtual: VirtualNode) -> Any:
    """Checks a virtual node against its anchor role and returns what it wraps."""
    role = ANCHOR_ROLES.get(virtual.anchor_role)
    if role is None:
        raise MalformedCst(span=owner.span, node_type=owner.type, details=f"unknown anchor role '{virtual.anchor_role}' in field '{name}'.")
    if role["owner"] != owner.type or role["field"] != name:
        raise MalformedCst(span=owner.span, node_type=owner.type, details=f"anchor role '{virtual.anchor_role}' does not belong in field '{name}'.")

    wrapped = virtual.wrapped
    arity = role["arity"]
    if arity is WrappedArity.LIST and not isinstance(wrapped, list):
        raise MalformedCst(span=owner.span, node_type=owner.type, details=f"'{virtual.anchor_role}' must wrap a list, found {type(wrapped).__name__}.")
    if arity is WrappedArity.NODE and not isinstance(wrapped, (CstNode, ASTNode)):
        raise MalformedCst(span=owner.span, node_type=owner.type, details=f"'{virtual.anchor_role}' must wrap exactly one node, found {type(wrapped).__name__}.")
    if arity is WrappedArity.NONE and wrapped is not None:
        raise MalformedCst(span=owner.span, node_type=owner.type, details=f"'{virtual.anchor_role}' is a placeholder and must wrap nothing.")
    return wrapped
