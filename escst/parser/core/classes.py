"""
Defines the formal data structures (contracts) for the ESTree-shaped Abstract
Syntax Tree produced by the reference parser.

Each node is a pydantic model whose field set is fixed by its `type`, exactly as
listed in `escst.config.config.GRAMMAR`. Every node carries a `Span` so later
stages can report precise locations; CST information never lives here.
"""

from typing import Dict, List, Optional, Type, Union

from pydantic import BaseModel, ConfigDict

# --- Core Data Structures ---


class Span(BaseModel):
    """Represents a location in the source code: byte offsets plus 1-based line/column."""

    model_config = ConfigDict(frozen=True)

    start: int
    end: int
    s_line: int
    s_col: int
    e_line: int
    e_col: int


class ASTNode(BaseModel):
    """A base class for all AST nodes, ensuring they have a type tag and a span."""

    model_config = ConfigDict(frozen=True)

    type: str
    span: Optional[Span] = None


# --- Literals and Identifiers ---


class Identifier(ASTNode):
    type: str = "Identifier"
    name: str


class Literal(ASTNode):
    type: str = "Literal"
    value: Union[None, bool, int, float, str]
    raw: str


# --- Expressions ---


class CallExpression(ASTNode):
    type: str = "CallExpression"
    callee: "Expression"
    arguments: List["Expression"]


Expression = Union[Identifier, Literal, CallExpression]


# --- Statements ---


class ExpressionStatement(ASTNode):
    type: str = "ExpressionStatement"
    expression: Expression


class ReturnStatement(ASTNode):
    type: str = "ReturnStatement"
    argument: Optional[Expression] = None


class EmptyStatement(ASTNode):
    type: str = "EmptyStatement"


class BlockStatement(ASTNode):
    type: str = "BlockStatement"
    body: List["Statement"]


class FunctionDeclaration(ASTNode):
    type: str = "FunctionDeclaration"
    id: Identifier
    params: List[Identifier]
    body: BlockStatement


Statement = Union[FunctionDeclaration, ReturnStatement, ExpressionStatement, EmptyStatement]


# --- Top-level Structures ---


class Program(ASTNode):
    """The root of the entire AST, representing a single script."""

    type: str = "Program"
    body: List[Statement]


for _model in (CallExpression, ExpressionStatement, ReturnStatement, BlockStatement, FunctionDeclaration, Program):
    _model.model_rebuild()


# Type tag -> model class, used to rebuild plain AST nodes from CST nodes.
NODE_CLASSES: Dict[str, Type[ASTNode]] = {
    cls.model_fields["type"].default: cls
    for cls in (Identifier, Literal, CallExpression, ExpressionStatement, ReturnStatement, EmptyStatement, BlockStatement, FunctionDeclaration, Program)
}
