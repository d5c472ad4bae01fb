"""Named material presets.

The four materials of the classic scene:

    ivory       matte off-white with a soft highlight
    glass       mostly refractive, index 1.5
    red_rubber  almost purely diffuse
    mirror      near-perfect reflector with a very sharp highlight
"""

from tinytracer.materials.material import MaterialParams

IVORY = MaterialParams(
    diffuse_color=(0.4, 0.4, 0.3),
    albedo=(0.6, 0.3, 0.1, 0.0),
    specular_exponent=50.0,
    refractive_index=1.0,
)

GLASS = MaterialParams(
    diffuse_color=(0.6, 0.7, 0.8),
    albedo=(0.0, 0.5, 0.1, 0.8),
    specular_exponent=125.0,
    refractive_index=1.5,
)

RED_RUBBER = MaterialParams(
    diffuse_color=(0.3, 0.1, 0.1),
    albedo=(0.9, 0.1, 0.0, 0.0),
    specular_exponent=10.0,
    refractive_index=1.0,
)

MIRROR = MaterialParams(
    diffuse_color=(1.0, 1.0, 1.0),
    albedo=(0.0, 10.0, 0.8, 0.0),
    specular_exponent=1425.0,
    refractive_index=1.0,
)

PRESETS: dict[str, MaterialParams] = {
    "ivory": IVORY,
    "glass": GLASS,
    "red_rubber": RED_RUBBER,
    "mirror": MIRROR,
}


def get_preset(name: str) -> MaterialParams:
    """Look up a material preset by name.

    Raises:
        ValueError: If no preset has that name.
    """
    try:
        return PRESETS[name]
    except KeyError:
        raise ValueError(
            f"Unknown material preset: {name!r} (expected one of {sorted(PRESETS)})"
        ) from None
