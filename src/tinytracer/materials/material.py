"""Phong material model and material registry.

A material describes how a surface responds to light in the Whitted
shading model:

    color = diffuse_color * I_diffuse * albedo.x
          + white * I_specular * albedo.y
          + reflected_color * albedo.z
          + refracted_color * albedo.w

The four albedo weights are independent. They are not required to sum to
one; any overshoot is handled later by the framebuffer tone mapping.

Materials are stored in Taichi fields and looked up by material ID inside
kernels. A lookup returns the Material by value, so hit records never alias
the registry.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from tinytracer.materials.material import add_material
    >>> ivory = add_material(
    ...     diffuse_color=(0.4, 0.4, 0.3),
    ...     albedo=(0.6, 0.3, 0.1, 0.0),
    ...     specular_exponent=50.0,
    ... )
"""

from dataclasses import asdict, dataclass
from typing import Any

import taichi as ti
import taichi.math as tm

# Type aliases
vec3 = tm.vec3
vec4 = tm.vec4


@ti.dataclass
class Material:
    """Surface material properties.

    Attributes:
        diffuse_color: Base color used by the diffuse term (RGB).
        albedo: Weights of the (diffuse, specular, reflection, refraction)
            contributions.
        specular_exponent: Phong shininess exponent (>= 0).
        refractive_index: Index of refraction of the material (> 0).
    """

    diffuse_color: vec3
    albedo: vec4
    specular_exponent: ti.f64
    refractive_index: ti.f64


@dataclass(frozen=True)
class MaterialParams:
    """Host-side description of a material.

    Used by presets and scene configuration. Converted to a Material in
    the registry by add_material.
    """

    diffuse_color: tuple[float, float, float]
    albedo: tuple[float, float, float, float]
    specular_exponent: float
    refractive_index: float = 1.0

    def as_dict(self) -> dict[str, Any]:
        """Return the parameters as a JSON-friendly dictionary."""
        data = asdict(self)
        data["diffuse_color"] = list(self.diffuse_color)
        data["albedo"] = list(self.albedo)
        return data


# =============================================================================
# Material Field Storage
# =============================================================================

# Maximum number of materials in the scene
MAX_MATERIALS = 256

material_diffuse_colors = ti.Vector.field(3, dtype=ti.f64, shape=MAX_MATERIALS)
material_albedos = ti.Vector.field(4, dtype=ti.f64, shape=MAX_MATERIALS)
material_specular_exponents = ti.field(dtype=ti.f64, shape=MAX_MATERIALS)
material_refractive_indices = ti.field(dtype=ti.f64, shape=MAX_MATERIALS)
num_materials = ti.field(dtype=ti.i32, shape=())


def clear_materials() -> None:
    """Clear all materials.

    Resets the material count to zero. Existing data in the fields will be
    overwritten when new materials are added.
    """
    num_materials[None] = 0


def add_material(
    diffuse_color: tuple[float, float, float],
    albedo: tuple[float, float, float, float],
    specular_exponent: float,
    refractive_index: float = 1.0,
) -> int:
    """Add a material to the registry.

    Parameters are stored as given. Out-of-range values (negative exponent,
    non-positive refractive index) are not rejected.

    Args:
        diffuse_color: The diffuse color as (R, G, B).
        albedo: The (diffuse, specular, reflection, refraction) weights.
        specular_exponent: Phong shininess exponent.
        refractive_index: Index of refraction (1.0 for opaque surfaces).

    Returns:
        The material ID of the added material.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
    """
    idx = num_materials[None]
    if idx >= MAX_MATERIALS:
        raise RuntimeError(f"Maximum number of materials ({MAX_MATERIALS}) exceeded")

    material_diffuse_colors[idx] = [float(c) for c in diffuse_color]
    material_albedos[idx] = [float(a) for a in albedo]
    material_specular_exponents[idx] = float(specular_exponent)
    material_refractive_indices[idx] = float(refractive_index)
    num_materials[None] = idx + 1
    return idx


def add_material_params(params: MaterialParams) -> int:
    """Add a material described by a MaterialParams instance."""
    return add_material(
        params.diffuse_color,
        params.albedo,
        params.specular_exponent,
        params.refractive_index,
    )


def get_material_count() -> int:
    """Get the number of materials in the registry."""
    return int(num_materials[None])


def get_material_params(material_id: int) -> MaterialParams:
    """Read a registered material back from the Taichi fields.

    Raises:
        ValueError: If material_id is not a registered material.
    """
    if not 0 <= material_id < get_material_count():
        raise ValueError(f"Invalid material_id: {material_id}")

    diffuse = material_diffuse_colors[material_id]
    albedo = material_albedos[material_id]
    return MaterialParams(
        diffuse_color=(float(diffuse[0]), float(diffuse[1]), float(diffuse[2])),
        albedo=(float(albedo[0]), float(albedo[1]), float(albedo[2]), float(albedo[3])),
        specular_exponent=float(material_specular_exponents[material_id]),
        refractive_index=float(material_refractive_indices[material_id]),
    )


@ti.func
def get_material(material_id: ti.i32) -> Material:
    """Get a copy of a material by ID.

    Args:
        material_id: The index of the material in the registry.

    Returns:
        The Material stored at that index.
    """
    return Material(
        diffuse_color=material_diffuse_colors[material_id],
        albedo=material_albedos[material_id],
        specular_exponent=material_specular_exponents[material_id],
        refractive_index=material_refractive_indices[material_id],
    )
