import re
from typing import Optional

from lark import Token as LarkToken
from lark.exceptions import LarkError, UnexpectedCharacters, UnexpectedToken

from escst.exceptions import CstError, ErrorCode
from escst.parser.core.classes import Span

# A mapping from Lark's internal token names to friendly, human-readable names.
FRIENDLY_TOKEN_NAMES = {
    "IDENTIFIER": "an identifier",
    "NUMBER": "a number",
    "STRING": "a string literal",
    "TRUE": "'true'",
    "FALSE": "'false'",
    "NULL": "'null'",
    "FUNCTION": "the 'function' keyword",
    "RETURN": "the 'return' keyword",
    "LPAR": "an opening parenthesis '('",
    "RPAR": "a closing parenthesis ')'",
    "LBRACE": "an opening brace '{'",
    "RBRACE": "a closing brace '}'",
    "COMMA": "a comma ','",
    "SEMI": "a semicolon ';'",
    "$END": "the end of the file",  # Lark's token for the end of input
}

SINGLE_CHARACTER_ESCAPES = {
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
}

LINE_CONTINUATIONS = ("\r\n", "\n", "\r", "\u2028", "\u2029")

ESCAPE_SEQUENCE = re.compile(r"\\(u\{[0-9A-Fa-f]+\}|u[0-9A-Fa-f]{4}|x[0-9A-Fa-f]{2}|0(?![0-9])|\r\n|[\s\S])")


def _decode_escape(match: "re.Match") -> str:
    sequence = match.group(1)
    if sequence in SINGLE_CHARACTER_ESCAPES:
        return SINGLE_CHARACTER_ESCAPES[sequence]
    if sequence in LINE_CONTINUATIONS:
        return ""
    if sequence == "0":
        return "\0"
    if sequence.startswith("u{"):
        return chr(int(sequence[2:-1], 16))
    if len(sequence) > 1:
        # \xHH and \uHHHH
        return chr(int(sequence[1:], 16))
    # Any other escaped character stands for itself: \' \" \\ and friends.
    return sequence


def decode_string_literal(raw: str) -> str:
    """
    Returns the cooked value of a quoted string literal.

    `raw` is the source text including its quotes. Escaped UTF-16 surrogate pairs
    such as '\\uD83D\\uDE00' are joined into the character they encode.
    """
    value = ESCAPE_SEQUENCE.sub(_decode_escape, raw[1:-1])
    if any("\ud800" <= char <= "\udfff" for char in value):
        value = value.encode("utf-16-le", "surrogatepass").decode("utf-16-le", "surrogatepass")
    return value


def _span_from_lark_token(token: LarkToken) -> Optional[Span]:
    if token.line is None or token.column is None:
        return None
    start = token.start_pos or 0
    return Span(
        start=start,
        end=token.end_pos if token.end_pos is not None else start,
        s_line=token.line,
        s_col=token.column,
        e_line=token.end_line if token.end_line is not None else token.line,
        e_col=token.end_column if token.end_column is not None else token.column,
    )


def _translate_lark_error(err: LarkError, file_path: Optional[str] = None) -> CstError:
    """Translates a generic LarkError into a user-friendly CstError."""

    if isinstance(err, UnexpectedToken):
        # Build a helpful message about what was expected.
        expected_str = ""
        if err.expected:
            friendly_expected = [FRIENDLY_TOKEN_NAMES.get(e, e) for e in sorted(err.expected)]
            if len(friendly_expected) > 1:
                expected_str = f"Expected one of: {', '.join(friendly_expected[:-1])} or {friendly_expected[-1]}"
            else:
                expected_str = f"Expected {friendly_expected[0]}"

        found_token = err.token
        found_str = f"but found '{found_token.value}' instead."
        if found_token.type == "$END":
            found_str = "but reached the end of the file instead."

        details = f"{expected_str}, {found_str}" if expected_str else f"Found unexpected token '{found_token.value}'."

        span = _span_from_lark_token(found_token)
        if span is None:
            return CstError(code=ErrorCode.SYNTAX_UNEXPECTED_TOKEN, file_path=file_path, line=err.line, details=details)
        return CstError(code=ErrorCode.SYNTAX_UNEXPECTED_TOKEN, span=span, file_path=file_path, details=details)

    elif isinstance(err, UnexpectedCharacters):
        span = Span(start=err.pos_in_stream, end=err.pos_in_stream + 1, s_line=err.line, s_col=err.column, e_line=err.line, e_col=err.column + 1)
        return CstError(code=ErrorCode.SYNTAX_INVALID_CHARACTER, span=span, file_path=file_path, char=err.char)

    # Fallback for any other Lark error
    return CstError(code=ErrorCode.SYNTAX_PARSING_ERROR, file_path=file_path, line=getattr(err, "line", None), details=str(err))
