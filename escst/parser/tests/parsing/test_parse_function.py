import pytest

from escst.exceptions import CstError, ErrorCode
from escst.parser.core.classes import *
from escst.parser.core.parser import parse_javascript


@pytest.mark.parametrize(
    "code",
    [
        pytest.param("function foo() {}", id="basic"),
        pytest.param("function foo(a) {}", id="1_param"),
        pytest.param("function foo(a, b, c) {}", id="3_param"),
        pytest.param("function foo() { return; }", id="empty_return"),
        pytest.param("function foo() { return 1; }", id="return_number"),
        pytest.param("function foo() { return bar(1, 'x'); }", id="return_call"),
        pytest.param("function foo() { function bar() {} }", id="nested_function"),
        pytest.param("function foo() { ; ; }", id="empty_statements"),
        pytest.param("/*1*/ function /*2*/ foo /*3*/ ( /*4*/ ) /*5*/ { }", id="comments_everywhere"),
        pytest.param("function foo(a, // first\n b) {}", id="line_comment_inside_parameters"),
        pytest.param("function foo() {\r\n  return ((a));\r\n}", id="crlf_and_redundant_parentheses"),
        pytest.param("f(a)(b);", id="chained_calls"),
        pytest.param("", id="empty_program"),
    ],
)
def test_function_declaration_parsed_correctly(code):
    result = parse_javascript(code)
    assert result.ast is not None
    assert "".join(token.raw for token in result.tokens) == code


@pytest.mark.parametrize(
    "code, error",
    [
        pytest.param("function () {}", ErrorCode.SYNTAX_UNEXPECTED_TOKEN, id="missing_name"),
        pytest.param("function foo( {}", ErrorCode.SYNTAX_UNEXPECTED_TOKEN, id="missing_)"),
        pytest.param("function foo() {", ErrorCode.SYNTAX_UNEXPECTED_TOKEN, id="missing_}"),
        pytest.param("function foo() return 1;", ErrorCode.SYNTAX_UNEXPECTED_TOKEN, id="missing_body"),
        pytest.param("function foo(a,) {}", ErrorCode.SYNTAX_UNEXPECTED_TOKEN, id="trailing_comma_in_params"),
        pytest.param("function foo(1) {}", ErrorCode.SYNTAX_UNEXPECTED_TOKEN, id="literal_param"),
        pytest.param("function foo() { return 1 }", ErrorCode.SYNTAX_UNEXPECTED_TOKEN, id="missing_semicolon"),
        pytest.param("f(a,);", ErrorCode.SYNTAX_UNEXPECTED_TOKEN, id="trailing_comma_in_arguments"),
        pytest.param("function foo() { # }", ErrorCode.SYNTAX_INVALID_CHARACTER, id="invalid_character"),
        pytest.param("function foo() {} /* open", ErrorCode.SYNTAX_INVALID_CHARACTER, id="unterminated_block_comment"),
        pytest.param("f('abc);", ErrorCode.SYNTAX_INVALID_CHARACTER, id="unterminated_string"),
    ],
)
def test_function_declaration_parsed_error(code, error):
    with pytest.raises(CstError) as excinfo:
        parse_javascript(code)
    assert excinfo.value.code == error


def test_syntax_error_reports_line():
    with pytest.raises(CstError) as excinfo:
        parse_javascript("function foo() {\n  return 1\n}")
    assert "Line: 3" in str(excinfo.value)
    assert "a semicolon ';'" in str(excinfo.value)


def test_unexpected_end_of_file_message():
    with pytest.raises(CstError) as excinfo:
        parse_javascript("function foo() {")
    assert "reached the end of the file" in str(excinfo.value)


def test_spans_are_offsets_and_one_based_positions():
    result = parse_javascript("\nfunction foo(a) {}")
    declaration = result.ast.body[0]
    assert isinstance(declaration, FunctionDeclaration)
    assert declaration.span.start == 1
    assert declaration.span.end == len("\nfunction foo(a) {}")
    assert (declaration.span.s_line, declaration.span.s_col) == (2, 1)
    assert declaration.id.span.start == 10
    assert declaration.params[0].span.s_col == 14


def test_program_span_covers_whole_source():
    code = "  // lead\nfoo();  \n"
    result = parse_javascript(code)
    assert result.ast.span.start == 0
    assert result.ast.span.end == len(code)


@pytest.mark.parametrize(
    "code, location",
    [
        pytest.param("function foo() {\n  return 1\n}", "(Line: 3, Column: 1)", id="unexpected_token"),
        pytest.param("function foo() { # }", "(Line: 1, Column: 18)", id="invalid_character"),
        pytest.param("f(\n  'abc);", "(Line: 2, Column: 3)", id="unterminated_string"),
    ],
)
def test_syntax_error_reports_file_and_column(code, location):
    with pytest.raises(CstError) as excinfo:
        parse_javascript(code, "demo.js")
    assert str(excinfo.value).startswith(f"Error in 'demo.js' {location}:\n")
    assert excinfo.value.span is not None


def test_syntax_error_span_points_at_offending_token():
    with pytest.raises(CstError) as excinfo:
        parse_javascript("function (a) {}")
    span = excinfo.value.span
    assert (span.start, span.end) == (9, 10)
    assert (span.s_line, span.s_col) == (1, 10)


def test_string_with_line_continuation_keeps_line_numbers():
    result = parse_javascript("f('a\\\nb');\ng();")
    last_call = result.ast.body[1]
    assert last_call.span.s_line == 3
    assert "".join(token.raw for token in result.tokens) == "f('a\\\nb');\ng();"
