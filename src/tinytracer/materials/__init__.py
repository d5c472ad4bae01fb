"""Materials module for the Phong shading model.

Components:
    material: Material dataclass and the Taichi-backed material registry
    presets: Named materials (ivory, glass, red_rubber, mirror)
"""

from .material import (
    MAX_MATERIALS,
    Material,
    MaterialParams,
    add_material,
    add_material_params,
    clear_materials,
    get_material,
    get_material_count,
    get_material_params,
)
from .presets import GLASS, IVORY, MIRROR, PRESETS, RED_RUBBER, get_preset

__all__ = [
    "Material",
    "MaterialParams",
    "MAX_MATERIALS",
    "add_material",
    "add_material_params",
    "clear_materials",
    "get_material",
    "get_material_count",
    "get_material_params",
    "IVORY",
    "GLASS",
    "RED_RUBBER",
    "MIRROR",
    "PRESETS",
    "get_preset",
]
