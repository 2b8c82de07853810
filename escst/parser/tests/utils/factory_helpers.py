from typing import List, Optional, Union

from escst.parser.core.classes import *


def get_span(start: int = 0, end: int = 0, s_line: int = 1, s_col: int = 1, e_line: int = 1, e_col: int = 1):
    return Span(start=start, end=end, s_line=s_line, s_col=s_col, e_line=e_line, e_col=e_col)


def get_identifier(name: str):
    return Identifier(span=get_span(), name=name)


def get_number_literal(value: Union[int, float], raw: Optional[str] = None):
    return Literal(span=get_span(), value=value, raw=raw if raw is not None else str(value))


def get_string_literal(value: str, quote: str = '"', raw: Optional[str] = None):
    return Literal(span=get_span(), value=value, raw=raw if raw is not None else f"{quote}{value}{quote}")


def get_keyword_literal(raw: str):
    return Literal(span=get_span(), value={"true": True, "false": False, "null": None}[raw], raw=raw)


def get_call(callee: Union[str, Expression], arguments: Optional[List[Expression]] = None):
    callee_node = get_identifier(callee) if isinstance(callee, str) else callee
    return CallExpression(span=get_span(), callee=callee_node, arguments=arguments or [])


def get_expression_statement(expression: Expression):
    return ExpressionStatement(span=get_span(), expression=expression)


def get_return_statement(argument: Optional[Expression] = None):
    return ReturnStatement(span=get_span(), argument=argument)


def get_empty_statement():
    return EmptyStatement(span=get_span())


def get_block(body: Optional[List[Statement]] = None):
    return BlockStatement(span=get_span(), body=body or [])


def get_function_declaration(name: str, params: Optional[List[str]] = None, body: Optional[List[Statement]] = None) -> FunctionDeclaration:
    """
    A flexible factory to build FunctionDeclaration nodes for tests.

    Args:
        name: The name of the function.
        params: Parameter names, e.g. ["a", "b"]. Defaults to [].
        body: The statements of the function body. Defaults to an empty body.
    """
    param_objects = [get_identifier(param) for param in params or []]
    return FunctionDeclaration(span=get_span(), id=get_identifier(name), params=param_objects, body=get_block(body))


def get_program(body: List[Statement]):
    return Program(span=get_span(), body=body)
