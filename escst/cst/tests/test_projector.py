import pytest

from escst.cst.extras import ExtrasRecord
from escst.cst.nodes import CstNode, VirtualNode
from escst.cst.projector import project_ast
from escst.cst.strategies import EXTENDED_LABEL_STRATEGY, VIRTUAL_NODE_STRATEGY
from escst.cst.tests.helpers import ROUND_TRIP_SOURCES, build
from escst.exceptions import ErrorCode, MalformedCst
from escst.parser.core.classes import FunctionDeclaration, Program
from escst.parser.core.parser import parse_javascript

ALL_STRATEGIES = [pytest.param(VIRTUAL_NODE_STRATEGY, id="virtual-node"), pytest.param(EXTENDED_LABEL_STRATEGY, id="extended-label")]


@pytest.mark.parametrize("strategy", ALL_STRATEGIES)
@pytest.mark.parametrize("code", list(ROUND_TRIP_SOURCES.values()), ids=list(ROUND_TRIP_SOURCES))
def test_projection_is_the_original_ast(strategy, code):
    ast = parse_javascript(code).ast
    assert project_ast(build(code, strategy)) == ast


@pytest.mark.parametrize("strategy", ALL_STRATEGIES)
def test_projection_is_idempotent(strategy):
    projected = project_ast(build(ROUND_TRIP_SOURCES["nested"], strategy))
    assert project_ast(projected) is projected
    assert isinstance(projected, Program)
    assert isinstance(projected.body[0], FunctionDeclaration)


def test_projection_drops_virtual_nodes():
    projected = project_ast(build("function f(a, b) {}", VIRTUAL_NODE_STRATEGY))
    assert [param.name for param in projected.body[0].params] == ["a", "b"]


# --- Malformed trees ---


def _record(owner_type: str) -> ExtrasRecord:
    return ExtrasRecord(owner_type, frozenset({"before", "inside", "after"}), VIRTUAL_NODE_STRATEGY.name)


def _identifier(name: str) -> CstNode:
    return CstNode(type="Identifier", node_fields={"name": name}, extras=_record("Identifier"))


def _function(params) -> CstNode:
    body = CstNode(type="BlockStatement", node_fields={"body": []}, extras=_record("BlockStatement"))
    return CstNode(type="FunctionDeclaration", node_fields={"id": _identifier("f"), "params": params, "body": body}, extras=_record("FunctionDeclaration"))


def test_hand_built_tree_projects():
    virtual = VirtualNode(anchor_role="paramList", wrapped=[_identifier("a")], extras=_record("paramList"))
    projected = project_ast(_function(virtual))
    assert projected.params[0].name == "a"


@pytest.mark.parametrize(
    "node, message",
    [
        pytest.param(VirtualNode(anchor_role="paramList", wrapped=[], extras=_record("paramList")), "virtual node", id="virtual_root"),
        pytest.param("function f() {}", "expected a CST node", id="not_a_node"),
        pytest.param(CstNode(type="ArrowFunctionExpression", node_fields={}, extras=_record("ArrowFunctionExpression")), "does not define", id="unknown_type"),
        pytest.param(CstNode(type="Identifier", node_fields={}, extras=_record("Identifier")), "'name' is missing", id="missing_field"),
        pytest.param(CstNode(type="ExpressionStatement", node_fields={"expression": None}, extras=_record("ExpressionStatement")), "'expression' is empty", id="empty_required_field"),
        pytest.param(_function(_identifier("a")), "must hold a list", id="node_in_list_field"),
        pytest.param(_function(VirtualNode(anchor_role="argumentList", wrapped=[], extras=_record("argumentList"))), "does not belong", id="wrong_anchor_role"),
        pytest.param(_function(VirtualNode(anchor_role="bodyList", wrapped=[], extras=_record("bodyList"))), "unknown anchor role", id="unknown_anchor_role"),
        pytest.param(_function(VirtualNode(anchor_role="paramList", wrapped=_identifier("a"), extras=_record("paramList"))), "must wrap a list", id="wrong_arity"),
    ],
)
def test_malformed_cst_rejected(node, message):
    with pytest.raises(MalformedCst) as excinfo:
        project_ast(node)
    assert excinfo.value.code == ErrorCode.MALFORMED_CST
    assert message in str(excinfo.value)
