"""
Lexical units shared by the reference parser and the CST machinery.

A `Token` is immutable once produced. The token stream handed to the CST builder
tiles the source text completely; each token is either semantic (claimed by an
AST node) or an extra (comments, whitespace, redundant punctuation).
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict

from .classes import Span


class TokenKind(str, Enum):
    COMMENT_LINE = "Comment-Line"
    COMMENT_BLOCK = "Comment-Block"
    WHITESPACE = "Whitespace"
    LINE_TERMINATOR = "LineTerminator"
    PUNCTUATION = "Punctuation"
    IDENTIFIER = "Identifier"
    KEYWORD = "Keyword"
    LITERAL = "Literal"


class Token(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: TokenKind
    raw: str
    span: Span
    semantic: bool = False

    @property
    def is_extra(self) -> bool:
        return not self.semantic

    def describe(self) -> str:
        """Short human readable form used in error messages."""
        return f"{self.kind.value} {self.raw!r} at line {self.span.s_line}, column {self.span.s_col}"


# --- Lexer terminal mapping ---
# Lark terminal name -> token kind.

TERMINAL_KINDS = {
    "FUNCTION": TokenKind.KEYWORD,
    "RETURN": TokenKind.KEYWORD,
    "TRUE": TokenKind.LITERAL,
    "FALSE": TokenKind.LITERAL,
    "NULL": TokenKind.LITERAL,
    "IDENTIFIER": TokenKind.IDENTIFIER,
    "NUMBER": TokenKind.LITERAL,
    "STRING": TokenKind.LITERAL,
    "LPAR": TokenKind.PUNCTUATION,
    "RPAR": TokenKind.PUNCTUATION,
    "LBRACE": TokenKind.PUNCTUATION,
    "RBRACE": TokenKind.PUNCTUATION,
    "COMMA": TokenKind.PUNCTUATION,
    "SEMI": TokenKind.PUNCTUATION,
    "WS": TokenKind.WHITESPACE,
    "NEWLINE": TokenKind.LINE_TERMINATOR,
    "LINE_COMMENT": TokenKind.COMMENT_LINE,
    "BLOCK_COMMENT": TokenKind.COMMENT_BLOCK,
}

KEYWORD_LITERALS = {"true": True, "false": False, "null": None}
