import pytest

from escst.cst.extras import ExtrasRecord
from escst.exceptions import CstError, ErrorCode, InvalidLabel
from escst.parser.core.classes import Span
from escst.parser.core.tokens import Token, TokenKind


def make_token(raw: str, start: int, kind: TokenKind = TokenKind.COMMENT_BLOCK, semantic: bool = False) -> Token:
    return Token(kind=kind, raw=raw, span=Span(start=start, end=start + len(raw), s_line=1, s_col=start + 1, e_line=1, e_col=start + len(raw) + 1), semantic=semantic)


@pytest.fixture
def record():
    return ExtrasRecord("FunctionDeclaration", frozenset({"before", "inside", "after"}), "virtual-node")


def test_get_on_empty_label_returns_empty(record):
    assert record.get("before") == ()
    assert record.is_empty()


def test_set_then_get_preserves_order(record):
    tokens = [make_token("/*a*/", 0), make_token(" ", 5, TokenKind.WHITESPACE), make_token("/*b*/", 6)]
    record.set("after", tokens)
    assert record.get("after") == tuple(tokens)
    assert record.labels() == ("after",)
    assert record.to_dict() == {"after": ["/*a*/", " ", "/*b*/"]}


def test_set_empty_sequence_removes_label(record):
    record.set("inside", [make_token(" ", 0, TokenKind.WHITESPACE)])
    record.set("inside", [])
    assert record.is_empty()


@pytest.mark.parametrize("label", ["afterName", "", "BEFORE"], ids=["other_strategy_label", "empty_label", "wrong_case"])
def test_invalid_label_rejected(record, label):
    with pytest.raises(InvalidLabel) as excinfo:
        record.get(label)
    assert excinfo.value.code == ErrorCode.INVALID_LABEL
    with pytest.raises(InvalidLabel):
        record.set(label, [make_token(" ", 0, TokenKind.WHITESPACE)])


def test_semantic_token_rejected(record):
    with pytest.raises(CstError) as excinfo:
        record.set("before", [make_token("function", 0, TokenKind.KEYWORD, semantic=True)])
    assert excinfo.value.code == ErrorCode.SEMANTIC_TOKEN_IN_EXTRAS


def test_out_of_order_tokens_rejected(record):
    with pytest.raises(CstError) as excinfo:
        record.set("before", [make_token("/*b*/", 6), make_token("/*a*/", 0)])
    assert excinfo.value.code == ErrorCode.EXTRAS_OUT_OF_ORDER


def test_sealed_record_is_read_only(record):
    record.set("before", [make_token("/*a*/", 0)])
    record.seal()
    assert record.sealed
    with pytest.raises(CstError) as excinfo:
        record.set("after", [make_token("/*b*/", 10)])
    assert excinfo.value.code == ErrorCode.RECORD_SEALED
    # Reads still work after sealing.
    assert [token.raw for token in record.get("before")] == ["/*a*/"]


def test_tokens_returns_every_label_in_source_order(record):
    record.set("after", [make_token("/*c*/", 20)])
    record.set("before", [make_token("/*a*/", 0)])
    record.set("inside", [make_token("/*b*/", 10)])
    assert [token.raw for token in record.tokens()] == ["/*a*/", "/*b*/", "/*c*/"]


def test_equality_ignores_seal_state(record):
    other = ExtrasRecord("FunctionDeclaration", frozenset({"before", "inside", "after"}), "virtual-node")
    record.set("before", [make_token("/*a*/", 0)])
    other.set("before", [make_token("/*a*/", 0)])
    record.seal()
    assert record == other
