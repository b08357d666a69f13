"""
errors.py - Exceptions raised by the character conversion.

Module: ir_to_ck3.errors
"""


class ConversionError(RuntimeError):
    """A conversion input or stage is invalid and the run cannot continue."""
