import logging
import os
from typing import List, NamedTuple, Optional, Set, Union

from lark import Lark, LarkError, Transformer
from lark import Token as LarkToken

from escst.exceptions import TokenStreamMismatch
from escst.parser.utils.helpers import _translate_lark_error, decode_string_literal

from .classes import *
from .tokens import KEYWORD_LITERALS, TERMINAL_KINDS, Token

logger = logging.getLogger(__name__)

LARK_PARSER = None

try:
    # Use importlib.resources for robust package data access
    from importlib.resources import files as pkg_files

    # The path is relative to the 'escst.parser' subpackage
    estree_grammar = (pkg_files("escst.parser") / "estree.lark").read_text()
except (ImportError, FileNotFoundError):
    # Fallback for development environments or older Python versions
    grammar_path = os.path.join(os.path.dirname(os.path.dirname(__file__)), "estree.lark")
    with open(grammar_path, "r") as f:
        estree_grammar = f.read()

# The basic lexer is required so `Lark.lex` can replay the exact same tokenization,
# ignored terminals included. All tokens are kept in the tree so the transformer
# decides which ones are semantic.
LARK_PARSER = Lark(estree_grammar, start="start", parser="lalr", lexer="basic", keep_all_tokens=True)


class ParseResult(NamedTuple):
    ast: Program
    tokens: List[Token]


class EstreeTransformer(Transformer):
    """
    Transforms the Lark parse tree into the ESTree-shaped AST.

    Besides building nodes, every rule claims the tokens the grammar requires for
    that node. Claimed tokens become the semantic part of the token stream; any
    token left unclaimed (redundant grouping parentheses) is an extra.
    """

    def __init__(self):
        super().__init__()
        self.claimed: Set[int] = set()

    # --- Helper methods for claiming tokens and creating spans ---
    def _claim(self, *tokens: Optional[LarkToken]):
        for token in tokens:
            if isinstance(token, LarkToken):
                self.claimed.add(token.start_pos)

    def _span_from_token(self, token: LarkToken) -> Span:
        return Span(start=token.start_pos, end=token.end_pos, s_line=token.line, s_col=token.column, e_line=token.end_line, e_col=token.end_column)

    def _span_between(self, first: Union[LarkToken, ASTNode], last: Union[LarkToken, ASTNode]) -> Span:
        """Calculates a Span running from the start of `first` to the end of `last`."""
        head = first.span if isinstance(first, ASTNode) else self._span_from_token(first)
        tail = last.span if isinstance(last, ASTNode) else self._span_from_token(last)
        return Span(start=head.start, end=tail.end, s_line=head.s_line, s_col=head.s_col, e_line=tail.e_line, e_col=tail.e_col)

    # --- Leaves ---
    def identifier(self, items):
        (token,) = items
        self._claim(token)
        return Identifier(name=token.value, span=self._span_from_token(token))

    def literal(self, items):
        (token,) = items
        self._claim(token)
        if token.type == "NUMBER":
            value = float(token.value) if any(c in token.value for c in ".eE") else int(token.value)
        elif token.type == "STRING":
            value = decode_string_literal(token.value)
        else:
            value = KEYWORD_LITERALS[token.value]
        return Literal(value=value, raw=token.value, span=self._span_from_token(token))

    # --- Expressions ---
    def parenthesized(self, items):
        # The parentheses are not claimed: they stay in the stream as extras.
        _lpar, expression, _rpar = items
        return expression

    def arguments(self, items):
        self._claim(*items)
        return [item for item in items if not isinstance(item, LarkToken)]

    def call_expression(self, items):
        callee, lpar, arguments, rpar = items
        self._claim(lpar, rpar)
        return CallExpression(callee=callee, arguments=arguments or [], span=self._span_between(callee, rpar))

    # --- Statements ---
    def parameters(self, items):
        self._claim(*items)
        return [item for item in items if not isinstance(item, LarkToken)]

    def block(self, items):
        lbrace, *statements, rbrace = items
        self._claim(lbrace, rbrace)
        return BlockStatement(body=statements, span=self._span_between(lbrace, rbrace))

    def function_declaration(self, items):
        keyword, name, lpar, params, rpar, body = items
        self._claim(keyword, lpar, rpar)
        return FunctionDeclaration(id=name, params=params or [], body=body, span=self._span_between(keyword, body))

    def return_statement(self, items):
        keyword, argument, semi = items
        self._claim(keyword, semi)
        return ReturnStatement(argument=argument, span=self._span_between(keyword, semi))

    def expression_statement(self, items):
        expression, semi = items
        self._claim(semi)
        return ExpressionStatement(expression=expression, span=self._span_between(expression, semi))

    def empty_statement(self, items):
        (semi,) = items
        self._claim(semi)
        return EmptyStatement(span=self._span_from_token(semi))

    def start(self, statements):
        # Program spans are filled in by `parse_javascript`, which knows the whole source.
        return list(statements)


def _program_span(tokens: List[Token]) -> Span:
    if not tokens:
        return Span(start=0, end=0, s_line=1, s_col=1, e_line=1, e_col=1)
    first, last = tokens[0].span, tokens[-1].span
    return Span(start=first.start, end=last.end, s_line=first.s_line, s_col=first.s_col, e_line=last.e_line, e_col=last.e_col)


def tokenize(script_content: str, claimed: Optional[Set[int]] = None, file_path: Optional[str] = None) -> List[Token]:
    """
    Produces the complete token stream, ignored terminals included.

    `claimed` holds the start offsets of semantic tokens; when omitted every token
    is reported as an extra.
    """
    claimed = claimed or set()
    tokens = []
    try:
        for lark_token in LARK_PARSER.lex(script_content, dont_ignore=True):
            tokens.append(
                Token(
                    kind=TERMINAL_KINDS[lark_token.type],
                    raw=lark_token.value,
                    span=Span(
                        start=lark_token.start_pos,
                        end=lark_token.end_pos,
                        s_line=lark_token.line,
                        s_col=lark_token.column,
                        e_line=lark_token.end_line,
                        e_col=lark_token.end_column,
                    ),
                    semantic=lark_token.start_pos in claimed,
                )
            )
    except LarkError as e:
        raise _translate_lark_error(e, file_path) from e
    return tokens


def parse_javascript(script_content: str, file_path: str = "<stdin>") -> ParseResult:
    """Parses the source into an ESTree AST plus the fully partitioned token stream."""

    transformer = EstreeTransformer()
    try:
        parse_tree = LARK_PARSER.parse(script_content)
        statements = transformer.transform(parse_tree)
    except LarkError as e:
        raise _translate_lark_error(e, file_path) from e

    tokens = tokenize(script_content, transformer.claimed, file_path)
    semantic_count = sum(1 for token in tokens if token.semantic)
    if semantic_count != len(transformer.claimed):
        raise TokenStreamMismatch(
            node_type="Program",
            details=f"the lexer replay produced {semantic_count} semantic token(s) but the parser claimed {len(transformer.claimed)}",
        )

    logger.debug("Parsed %s: %d statement(s), %d token(s), %d semantic", file_path, len(statements), len(tokens), semantic_count)
    return ParseResult(ast=Program(body=statements, span=_program_span(tokens)), tokens=tokens)
