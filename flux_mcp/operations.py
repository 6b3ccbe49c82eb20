"""
Operation schemas for the Flux tools.

The catalog is fixed: four operations, each with an ordered list of fields.
Field order drives both the advertised input schema and the order in which
flags are emitted on the command line.

Defaults on FieldSpec are documentation for callers only. They are never
injected into a command.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from flux_mcp.errors import InvalidArgumentError, UnknownOperationError
from flux_mcp.validation import (
    validate_optional_enum,
    validate_optional_number,
    validate_optional_string,
    validate_required_enum,
    validate_required_string,
)

FLUX_MODELS = ("flux.1.1-pro", "flux.1-pro", "flux.1-dev", "flux.1.1-ultra")
ASPECT_RATIOS = ("1:1", "4:3", "3:4", "16:9", "9:16")
MASK_SHAPES = ("circle", "rectangle")
MASK_POSITIONS = ("center", "ground")
CONTROL_TYPES = ("canny", "depth", "pose")

MIN_DIMENSION = 256
MAX_DIMENSION = 2048


# ---------------------------------------------------------------------------
# Field rules
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RequiredString:
    required = True
    json_type = "string"

    def check(self, value: Any, field_name: str) -> str:
        return validate_required_string(value, field_name)


@dataclass(frozen=True)
class RequiredEnum:
    allowed: tuple[str, ...]
    required = True
    json_type = "string"

    def check(self, value: Any, field_name: str) -> str:
        return validate_required_enum(value, field_name, self.allowed)


@dataclass(frozen=True)
class OptionalString:
    required = False
    json_type = "string"

    def check(self, value: Any, field_name: str) -> str | None:
        return validate_optional_string(value, field_name)


@dataclass(frozen=True)
class OptionalNumber:
    minimum: int | float | None = None
    maximum: int | float | None = None
    required = False
    json_type = "number"

    def check(self, value: Any, field_name: str) -> int | float | None:
        return validate_optional_number(value, field_name, self.minimum, self.maximum)


@dataclass(frozen=True)
class OptionalEnum:
    allowed: tuple[str, ...]
    required = False
    json_type = "string"

    def check(self, value: Any, field_name: str) -> str | None:
        return validate_optional_enum(value, field_name, self.allowed)


FieldRule = RequiredString | RequiredEnum | OptionalString | OptionalNumber | OptionalEnum


@dataclass(frozen=True)
class FieldSpec:
    """One named argument of an operation."""

    name: str
    rule: FieldRule
    description: str
    default: Any = None

    @property
    def flag(self) -> str:
        return "--" + self.name.replace("_", "-")

    @property
    def required(self) -> bool:
        return self.rule.required


# ---------------------------------------------------------------------------
# Validated argument types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class GenerateArgs:
    prompt: str
    model: str | None = None
    aspect_ratio: str | None = None
    width: int | float | None = None
    height: int | float | None = None
    output: str | None = None


@dataclass(frozen=True)
class Img2ImgArgs:
    image: str
    prompt: str
    name: str
    model: str | None = None
    strength: int | float | None = None
    width: int | float | None = None
    height: int | float | None = None
    output: str | None = None


@dataclass(frozen=True)
class InpaintArgs:
    image: str
    prompt: str
    mask_shape: str | None = None
    position: str | None = None
    output: str | None = None


@dataclass(frozen=True)
class ControlArgs:
    type: str
    image: str
    prompt: str
    steps: int | float | None = None
    guidance: int | float | None = None
    output: str | None = None


OperationArgs = GenerateArgs | Img2ImgArgs | InpaintArgs | ControlArgs


@dataclass(frozen=True)
class OperationSchema:
    """Static description of one callable operation."""

    name: str
    description: str
    fields: tuple[FieldSpec, ...]
    args_type: type

    @property
    def required(self) -> tuple[str, ...]:
        return tuple(f.name for f in self.fields if f.required)

    @property
    def optional(self) -> tuple[str, ...]:
        return tuple(f.name for f in self.fields if not f.required)


def _model_field() -> FieldSpec:
    return FieldSpec(
        "model",
        OptionalEnum(FLUX_MODELS),
        "Model to use for generation",
        default="flux.1.1-pro",
    )


def _dimension_field(name: str, description: str) -> FieldSpec:
    return FieldSpec(name, OptionalNumber(MIN_DIMENSION, MAX_DIMENSION), description)


GENERATE = OperationSchema(
    name="generate",
    description="Generate an image from a text prompt",
    fields=(
        FieldSpec("prompt", RequiredString(), "Text prompt for image generation"),
        _model_field(),
        FieldSpec(
            "aspect_ratio", OptionalEnum(ASPECT_RATIOS), "Aspect ratio of the output image"
        ),
        _dimension_field("width", "Image width (ignored if aspect-ratio is set)"),
        _dimension_field("height", "Image height (ignored if aspect-ratio is set)"),
        FieldSpec("output", OptionalString(), "Output filename", default="generated.jpg"),
    ),
    args_type=GenerateArgs,
)

IMG2IMG = OperationSchema(
    name="img2img",
    description="Generate an image using another image as reference",
    fields=(
        FieldSpec("image", RequiredString(), "Input image path"),
        FieldSpec("prompt", RequiredString(), "Text prompt for generation"),
        FieldSpec("name", RequiredString(), "Name for the generation"),
        _model_field(),
        FieldSpec("strength", OptionalNumber(0, 1), "Generation strength", default=0.85),
        _dimension_field("width", "Output image width"),
        _dimension_field("height", "Output image height"),
        FieldSpec(
            "output", OptionalString(), "Output filename", default="outputs/generated.jpg"
        ),
    ),
    args_type=Img2ImgArgs,
)

INPAINT = OperationSchema(
    name="inpaint",
    description="Inpaint an image using a mask",
    fields=(
        FieldSpec("image", RequiredString(), "Input image path"),
        FieldSpec("prompt", RequiredString(), "Text prompt for inpainting"),
        FieldSpec(
            "mask_shape", OptionalEnum(MASK_SHAPES), "Shape of the mask", default="circle"
        ),
        FieldSpec(
            "position", OptionalEnum(MASK_POSITIONS), "Position of the mask", default="center"
        ),
        FieldSpec("output", OptionalString(), "Output filename", default="inpainted.jpg"),
    ),
    args_type=InpaintArgs,
)

CONTROL = OperationSchema(
    name="control",
    description="Generate an image using structural control",
    fields=(
        FieldSpec("type", RequiredEnum(CONTROL_TYPES), "Type of control to use"),
        FieldSpec("image", RequiredString(), "Input control image path"),
        FieldSpec("prompt", RequiredString(), "Text prompt for generation"),
        FieldSpec("steps", OptionalNumber(1, 100), "Number of inference steps", default=50),
        FieldSpec("guidance", OptionalNumber(0, 100), "Guidance scale"),
        FieldSpec("output", OptionalString(), "Output filename"),
    ),
    args_type=ControlArgs,
)

OPERATIONS: Mapping[str, OperationSchema] = MappingProxyType(
    {schema.name: schema for schema in (GENERATE, IMG2IMG, INPAINT, CONTROL)}
)


def get_operation(name: str) -> OperationSchema:
    """Look up an operation by name."""
    schema = OPERATIONS.get(name)
    if schema is None:
        raise UnknownOperationError(name)
    return schema


def validate_arguments(schema: OperationSchema, raw: Any) -> OperationArgs:
    """
    Run every field rule of schema against a raw argument payload.

    Rules run in declared order and the first failure wins. Keys the schema
    does not declare are ignored.

    Raises:
        InvalidArgumentError: payload is not an object or a field fails its rule
    """
    if raw is None:
        raw = {}
    if not isinstance(raw, Mapping):
        raise InvalidArgumentError("arguments", "arguments must be an object")

    values = {spec.name: spec.rule.check(raw.get(spec.name), spec.name) for spec in schema.fields}
    return schema.args_type(**values)
