"""Model, validate, parse, format, tokenize and generate transactional database histories."""

__version__ = "0.2.0"
__all__ = [
    "display",
    "errors",
    "generator",
    "lexer",
    "parser",
    "textapi",
    "types",
    "validation",
]