"""Translate validated operation arguments into a fluxcli command vector."""

from __future__ import annotations

from decimal import Decimal

from flux_mcp.operations import OperationArgs, OperationSchema


def render_value(value: str | int | float) -> str:
    """
    Render an argument value as a command-line token.

    Integral numbers have no decimal point (300.0 -> "300"). Other floats use
    the shortest round-trip digits in positional notation, never an exponent
    (0.00001 -> "0.00001"). The output never depends on locale.
    """
    if isinstance(value, str):
        return value
    if isinstance(value, int):
        return str(value)
    if value.is_integer():
        return str(int(value))
    return format(Decimal(repr(value)), "f")


def build_command(schema: OperationSchema, args: OperationArgs) -> tuple[str, ...]:
    """
    Build the command vector for one validated call.

    The operation name comes first. Then, in the schema's declared order, each
    present field adds its flag and rendered value. Absent fields add nothing.
    """
    tokens = [schema.name]
    for spec in schema.fields:
        value = getattr(args, spec.name)
        if value is None:
            continue
        tokens.extend((spec.flag, render_value(value)))
    return tuple(tokens)
