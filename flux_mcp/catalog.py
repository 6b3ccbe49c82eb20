"""MCP tool definitions derived from the operation schemas."""

from __future__ import annotations

from typing import Any

from mcp.types import Tool

from flux_mcp.operations import (
    OPERATIONS,
    FieldSpec,
    OperationSchema,
    OptionalEnum,
    OptionalNumber,
    RequiredEnum,
)


def _property(spec: FieldSpec) -> dict[str, Any]:
    prop: dict[str, Any] = {
        "type": spec.rule.json_type,
        "description": spec.description,
    }
    rule = spec.rule
    if isinstance(rule, (OptionalEnum, RequiredEnum)):
        prop["enum"] = list(rule.allowed)
    if isinstance(rule, OptionalNumber):
        if rule.minimum is not None:
            prop["minimum"] = rule.minimum
        if rule.maximum is not None:
            prop["maximum"] = rule.maximum
    if spec.default is not None:
        prop["default"] = spec.default
    return prop


def input_schema(schema: OperationSchema) -> dict[str, Any]:
    """JSON Schema for one operation's arguments, properties in declared order."""
    return {
        "type": "object",
        "properties": {spec.name: _property(spec) for spec in schema.fields},
        "required": list(schema.required),
    }


def build_tools() -> list[Tool]:
    """Return the tool catalog advertised by list_tools."""
    return [
        Tool(name=schema.name, description=schema.description, inputSchema=input_schema(schema))
        for schema in OPERATIONS.values()
    ]
