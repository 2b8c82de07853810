from typing import Iterator, List

from escst.cst.builder import build_cst
from escst.cst.extras import ExtrasRecord
from escst.cst.nodes import CstNode, VirtualNode
from escst.parser.core.parser import parse_javascript

SCENARIO = "/*1*/ function /*2*/ foo /*3*/ ( /*4*/ ) /*5*/ { }"

# Sources exercising every node type, every list shape and extras in every gap.
ROUND_TRIP_SOURCES = {
    "empty": "",
    "only_whitespace": " \n\t\n",
    "only_comment": "// nothing here",
    "scenario": SCENARIO,
    "params": "function add(a, b) { return add(a, b); }",
    "params_with_comments": "function add( /*x*/ a /*y*/ , // z\n b /*w*/ ) {}",
    "empty_return": "function f() { return /*nothing*/ ; }",
    "nested": "function outer() {\n  function inner(x) {\n    return x;\n  }\n  return inner(1);\n}\n",
    "calls": "f ( ) ; g(1, 'two', true, null) ;h(i(j))(k);",
    "redundant_parentheses": "((f))((a), ((b)));\nfunction g() { return (/*p*/ 1 /*q*/); }",
    "empty_statements": ";; function f() { ; }",
    "crlf": "function f() {\r\n  return 1;\r\n}\r\n",
    "trailing_comments": "a(); // one\n/* two */\n",
}


def build(code: str, strategy) -> CstNode:
    parsed = parse_javascript(code)
    return build_cst(parsed.ast, parsed.tokens, strategy)


def iter_nodes(node) -> Iterator:
    """Yields every CST and virtual node, parents before children."""
    if isinstance(node, list):
        for item in node:
            yield from iter_nodes(item)
        return
    if isinstance(node, VirtualNode):
        yield node
        yield from iter_nodes(node.wrapped)
    elif isinstance(node, CstNode):
        yield node
        for value in node.node_fields.values():
            yield from iter_nodes(value)


def iter_records(root: CstNode) -> Iterator[ExtrasRecord]:
    for node in iter_nodes(root):
        yield node.extras


def raws(record: ExtrasRecord, label: str) -> List[str]:
    return [token.raw for token in record.get(label)]
