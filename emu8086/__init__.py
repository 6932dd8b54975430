"""8086 expression evaluation, operand matching, a flat memory machine and editor helpers."""

__version__ = "0.1.0"