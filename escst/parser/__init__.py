from .core.parser import ParseResult, parse_javascript, tokenize
