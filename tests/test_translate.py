"""Unit tests for command vector translation."""

import pytest

from flux_mcp.operations import OPERATIONS, get_operation, validate_arguments
from flux_mcp.translate import build_command, render_value

MINIMAL = {
    "generate": {"prompt": "a fox"},
    "img2img": {"image": "in.jpg", "prompt": "a fox", "name": "fox"},
    "inpaint": {"image": "in.jpg", "prompt": "a fox"},
    "control": {"type": "canny", "image": "edges.png", "prompt": "a fox"},
}


def _build(name, raw):
    schema = get_operation(name)
    return build_command(schema, validate_arguments(schema, raw))


@pytest.mark.parametrize("name", list(OPERATIONS))
def test_required_only_vector(name):
    schema = get_operation(name)
    command = _build(name, MINIMAL[name])
    assert command[0] == name
    assert len(command) == 1 + 2 * len(schema.required)
    optional_flags = {spec.flag for spec in schema.fields if not spec.required}
    assert not optional_flags & set(command)


def test_generate_width_example():
    assert _build("generate", {"prompt": "x", "width": 300}) == (
        "generate",
        "--prompt",
        "x",
        "--width",
        "300",
    )


def test_order_follows_declaration_not_payload():
    raw = {
        "output": "fox.jpg",
        "height": 512,
        "width": 768,
        "aspect_ratio": "16:9",
        "model": "flux.1-dev",
        "prompt": "a fox",
    }
    assert _build("generate", raw) == (
        "generate",
        "--prompt", "a fox",
        "--model", "flux.1-dev",
        "--aspect-ratio", "16:9",
        "--width", "768",
        "--height", "512",
        "--output", "fox.jpg",
    )


def test_img2img_full():
    raw = dict(MINIMAL["img2img"], model="flux.1.1-ultra", strength=0.85, output="out.jpg")
    assert _build("img2img", raw) == (
        "img2img",
        "--image", "in.jpg",
        "--prompt", "a fox",
        "--name", "fox",
        "--model", "flux.1.1-ultra",
        "--strength", "0.85",
        "--output", "out.jpg",
    )


def test_zero_values_are_emitted():
    raw = dict(MINIMAL["control"], guidance=0)
    assert _build("control", raw)[-2:] == ("--guidance", "0")
    raw = dict(MINIMAL["img2img"], strength=0)
    assert _build("img2img", raw)[-2:] == ("--strength", "0")


def test_inpaint_mask_flags():
    raw = dict(MINIMAL["inpaint"], mask_shape="rectangle", position="ground")
    assert _build("inpaint", raw)[-4:] == ("--mask-shape", "rectangle", "--position", "ground")


@pytest.mark.parametrize(
    "value, expected",
    [
        ("text", "text"),
        (300, "300"),
        (300.0, "300"),
        (0.85, "0.85"),
        (7.5, "7.5"),
        (0, "0"),
        (-2, "-2"),
        (0.00001, "0.00001"),
        (0.000001, "0.000001"),
        (1.5e-7, "0.00000015"),
        (0.1 + 0.2, "0.30000000000000004"),
        (2048.0, "2048"),
        (1e20, "100000000000000000000"),
        (10**30, "1000000000000000000000000000000"),
    ],
)
def test_render_value(value, expected):
    assert render_value(value) == expected


def test_small_strength_has_no_exponent():
    raw = dict(MINIMAL["img2img"], strength=0.00001)
    assert _build("img2img", raw)[-2:] == ("--strength", "0.00001")


@pytest.mark.parametrize(
    "name, field, value, expected",
    [
        ("generate", "width", 512.0, "512"),
        ("generate", "height", 2048.0, "2048"),
        ("img2img", "strength", 1.0, "1"),
        ("control", "steps", 25.0, "25"),
        ("control", "guidance", 3.5, "3.5"),
    ],
)
def test_numeric_fields_render_positionally(name, field, value, expected):
    command = _build(name, dict(MINIMAL[name], **{field: value}))
    assert command[command.index("--" + field) + 1] == expected
