"""
Custom exception types for the ESTree CST toolkit.
"""

from enum import Enum
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from escst.parser.core.classes import Span


class ErrorCode(Enum):

    # --- Extras Record Errors ---
    INVALID_LABEL = "Label '{label}' is not part of the '{node_type}' vocabulary under the {strategy} strategy. Valid labels: {valid}."
    RECORD_SEALED = "The extras record of '{node_type}' is sealed; label '{label}' can no longer be set."
    SEMANTIC_TOKEN_IN_EXTRAS = "Token '{raw}' is a semantic token and cannot be stored under label '{label}' of '{node_type}'."
    EXTRAS_OUT_OF_ORDER = "Extras under label '{label}' of '{node_type}' are not in increasing source order."

    # --- Anchor Resolution Errors ---
    UNRESOLVABLE_ANCHOR = "No anchor covers the extras {gap} while building '{node_type}' under the {strategy} strategy. The slot schedule has no label for this position."
    UNKNOWN_GAP = "'{node_type}' has no gap {gap} under the {strategy} strategy ({count} gap(s) available)."

    # --- Builder Errors ---
    TOKEN_STREAM_MISMATCH = "The token stream does not match the AST at '{node_type}': {details}"

    # --- Projection & Reconstruction Errors ---
    MALFORMED_CST = "Malformed CST at '{node_type}': {details}"

    # --- Configuration Errors ---
    INCOMPLETE_SLOT_SCHEDULE = "The slot schedule of '{node_type}' under the {strategy} strategy {details}"
    UNKNOWN_STRATEGY = "Unknown strategy '{name}'. Available strategies: {available}."

    # --- Pipeline Errors ---
    ROUND_TRIP_FAILED = "Round trip check failed under the {strategy} strategy: {details}"

    # --- Syntax Errors (reference parser) ---

    # This code is for when the parser finds a token that is valid, but not in the right place.
    SYNTAX_UNEXPECTED_TOKEN = "Syntax Error: Invalid syntax. {details}"

    # This code is for when the lexer finds a character that doesn't belong to any token.
    SYNTAX_INVALID_CHARACTER = "Syntax Error: Invalid character '{char}' found."

    # This is a fallback for any other, less common parsing errors from Lark.
    SYNTAX_PARSING_ERROR = "Syntax Error: A general parsing error occurred. Details: {details}"


class CstError(Exception):
    def __init__(
        self,
        code: ErrorCode,
        span: Optional["Span"] = None,
        file_path: Optional[str] = None,
        **kwargs,
    ):
        self.code = code
        self.span = span
        self.details = kwargs

        # --- 1. Generate the core error message ---
        core_message = code.value.format(**kwargs)

        # --- 2. Determine the location prefix ---
        # The best case: we have a span with all details.
        location_prefix = ""
        in_file = f" in '{file_path}'" if file_path else ""
        if span:
            location_prefix = f"Error{in_file} (Line: {span.s_line}, Column: {span.s_col}):\n"
        # Lark errors without a token position only know the line.
        elif kwargs.get("line") is not None:
            location_prefix = f"Error{in_file} (Line: {kwargs['line']}):\n"
        elif file_path:
            location_prefix = f"Error in '{file_path}': "

        # --- 3. Combine them for the final message ---
        self.message = location_prefix + core_message

        super().__init__(self.message)


# --- Error kinds raised by the CST machinery ---
# Each kind fixes its code so callers can catch them by class.


class InvalidLabel(CstError):
    def __init__(self, span: Optional["Span"] = None, **kwargs):
        super().__init__(ErrorCode.INVALID_LABEL, span, **kwargs)


class UnresolvableAnchor(CstError):
    def __init__(self, span: Optional["Span"] = None, **kwargs):
        super().__init__(ErrorCode.UNRESOLVABLE_ANCHOR, span, **kwargs)


class TokenStreamMismatch(CstError):
    def __init__(self, span: Optional["Span"] = None, **kwargs):
        super().__init__(ErrorCode.TOKEN_STREAM_MISMATCH, span, **kwargs)


class MalformedCst(CstError):
    def __init__(self, span: Optional["Span"] = None, **kwargs):
        super().__init__(ErrorCode.MALFORMED_CST, span, **kwargs)


class IncompleteSlotSchedule(CstError):
    def __init__(self, **kwargs):
        super().__init__(ErrorCode.INCOMPLETE_SLOT_SCHEDULE, **kwargs)


class InternalError(Exception):
    def __init__(self, message: str):
        super().__init__(message)
