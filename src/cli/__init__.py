"""Console output for case runs."""

from .console import console, fail, header, make_field_table, ok, print_field_table

__all__ = [
    "console",
    "ok",
    "fail",
    "header",
    "make_field_table",
    "print_field_table",
]
