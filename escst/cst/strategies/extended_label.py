from typing import Dict, Iterable, Sequence

from escst.config.config import BOUNDARY_LABELS, EXTENDED_LABEL
from escst.parser.core.tokens import TokenKind

from ..slots import Child, Items, Label, Leaf, Slot, keyword, punct, labels_of
from .base import Strategy


class ExtendedLabelStrategy(Strategy):
    """
    Attaches extras to the nearest enclosing real node using labels specific to
    its type (`afterName`, `insideParams`, ...). The tree keeps exactly the AST
    shape; no node is ever synthesized.

    Only list elements and the root carry `before`/`after`: a child sitting in a
    single-node field is surrounded by its parent's own labels instead.
    """

    name = EXTENDED_LABEL

    def schedules(self) -> Dict[str, Sequence[Slot]]:
        return {
            "Program": (Items("body"),),
            "FunctionDeclaration": (
                keyword("function"),
                Label("beforeName"),
                Child("id", wrap=False),
                Label("afterName"),
                punct("("),
                Label("insideParams"),
                Items("params", separator=","),
                punct(")"),
                Label("afterParams"),
                Child("body", wrap=False),
            ),
            "BlockStatement": (punct("{"), Label("insideBody"), Items("body"), punct("}")),
            "ReturnStatement": (keyword("return"), Label("beforeArgument"), Child("argument", wrap=False), Label("afterArgument"), punct(";")),
            "ExpressionStatement": (Child("expression", wrap=False), Label("afterExpression"), punct(";")),
            "EmptyStatement": (punct(";"),),
            "CallExpression": (
                Child("callee", wrap=False),
                Label("afterCallee"),
                punct("("),
                Label("insideArguments"),
                Items("arguments", separator=","),
                punct(")"),
            ),
            "Identifier": (Leaf("name", TokenKind.IDENTIFIER),),
            "Literal": (Leaf("raw", TokenKind.LITERAL, derives=("value",)),),
        }

    def build_vocabulary(self, node_type: str) -> Iterable[str]:
        return (*BOUNDARY_LABELS, *labels_of(self.slot_schedule(node_type)))
