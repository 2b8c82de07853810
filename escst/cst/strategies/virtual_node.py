from typing import Dict, Iterable, Sequence

from escst.config.config import VIRTUAL_NODE, WRAPPED_FIELD
from escst.parser.core.tokens import TokenKind

from ..slots import Child, Items, Label, Leaf, Slot, Virtual, keyword, punct
from .base import Strategy


class VirtualNodeStrategy(Strategy):
    """
    Attaches extras with one fixed label set, {before, inside, after}, on every
    node type.

    Every child is wrapped, so each node owns the extras directly in front of and
    behind it. Positions with no AST node (the inside of an empty parameter or
    argument list) get a synthesized virtual node that replaces the list field and
    owns the surrounding parentheses.
    """

    name = VIRTUAL_NODE
    LABELS = frozenset({"before", "inside", "after"})

    def schedules(self) -> Dict[str, Sequence[Slot]]:
        return {
            "Program": (Items("body"),),
            "FunctionDeclaration": (keyword("function"), Child("id"), Virtual("params", role="paramList"), Child("body")),
            "BlockStatement": (punct("{"), Label("inside"), Items("body"), punct("}")),
            "ReturnStatement": (keyword("return"), Label("inside"), Child("argument"), punct(";")),
            "ExpressionStatement": (Child("expression"), punct(";")),
            "EmptyStatement": (punct(";"),),
            "CallExpression": (Child("callee"), Virtual("arguments", role="argumentList")),
            "Identifier": (Leaf("name", TokenKind.IDENTIFIER),),
            "Literal": (Leaf("raw", TokenKind.LITERAL, derives=("value",)),),
            # --- Anchor roles ---
            "paramList": (punct("("), Label("inside"), Items(WRAPPED_FIELD, separator=","), punct(")")),
            "argumentList": (punct("("), Label("inside"), Items(WRAPPED_FIELD, separator=","), punct(")")),
        }

    def build_vocabulary(self, node_type: str) -> Iterable[str]:
        return self.LABELS
