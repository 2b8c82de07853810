"""
ESTree CST toolkit: attach comments, whitespace and redundant punctuation to an
ESTree AST, project the result back to a plain AST, and reconstruct the exact
source text. Two attachment strategies are provided side by side.
"""

__version__ = "0.1.0"
