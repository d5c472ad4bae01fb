"""Scene module for scene storage and ray-scene queries.

Components:
    intersection: Sphere storage, floor toggle and the nearest-hit resolver
    lights: Point light storage
    manager: Scene builder with serialization
    presets: Built-in scenes

Scene data lives in Taichi fields (Structure of Arrays) and is read-only
while rendering.
"""

from .intersection import (
    MAX_DISTANCE,
    MAX_SPHERES,
    SceneHitRecord,
    add_sphere,
    clear_scene,
    get_sphere_count,
    intersect_scene,
    is_checkerboard_enabled,
    set_checkerboard_enabled,
)
from .lights import MAX_LIGHTS, Light, add_light, clear_lights, get_light, get_light_count
from .manager import (
    LightInfo,
    MaterialInfo,
    SceneConfig,
    SceneManager,
    SphereInfo,
)
from .presets import (
    SCENES,
    create_classic_scene,
    create_matte_scene,
    create_scene,
    create_single_sphere_scene,
)

__all__ = [
    # Intersection module
    "SceneHitRecord",
    "add_sphere",
    "clear_scene",
    "get_sphere_count",
    "intersect_scene",
    "set_checkerboard_enabled",
    "is_checkerboard_enabled",
    "MAX_DISTANCE",
    "MAX_SPHERES",
    # Lights module
    "Light",
    "add_light",
    "clear_lights",
    "get_light",
    "get_light_count",
    "MAX_LIGHTS",
    # Manager module
    "SceneManager",
    "MaterialInfo",
    "SphereInfo",
    "LightInfo",
    "SceneConfig",
    # Presets module
    "SCENES",
    "create_scene",
    "create_classic_scene",
    "create_matte_scene",
    "create_single_sphere_scene",
]
