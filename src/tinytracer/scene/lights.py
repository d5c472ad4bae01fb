"""Point light storage.

Lights are stored in Taichi fields (Structure of Arrays) and iterated by the
shading code for direct illumination and shadow tests. A light has no size,
so shadows are hard.
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class Light:
    """A point light.

    Attributes:
        position: World-space position of the light.
        intensity: Scalar intensity. Not validated.
    """

    position: vec3
    intensity: ti.f64


# Maximum number of lights in the scene
MAX_LIGHTS = 64

light_positions = ti.Vector.field(3, dtype=ti.f64, shape=MAX_LIGHTS)
light_intensities = ti.field(dtype=ti.f64, shape=MAX_LIGHTS)
num_lights = ti.field(dtype=ti.i32, shape=())


def clear_lights() -> None:
    """Remove all lights from the scene."""
    num_lights[None] = 0


def add_light(position: tuple[float, float, float], intensity: float) -> int:
    """Add a point light to the scene.

    Args:
        position: The light position as (x, y, z).
        intensity: The light intensity.

    Returns:
        The index of the added light.

    Raises:
        RuntimeError: If the maximum number of lights is exceeded.
    """
    idx = num_lights[None]
    if idx >= MAX_LIGHTS:
        raise RuntimeError(f"Maximum number of lights ({MAX_LIGHTS}) exceeded")
    light_positions[idx] = [float(p) for p in position]
    light_intensities[idx] = float(intensity)
    num_lights[None] = idx + 1
    return idx


def get_light_count() -> int:
    """Get the number of lights in the scene."""
    return int(num_lights[None])


@ti.func
def get_light(index: ti.i32) -> Light:
    """Get a copy of the light at index."""
    return Light(position=light_positions[index], intensity=light_intensities[index])
