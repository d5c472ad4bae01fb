"""Unified scene manager coordinating primitives, materials and lights.

This module provides a high-level scene building API on top of the Taichi
storage in the materials, intersection and lights modules. It keeps a
host-side record of everything added so scenes can be inspected and
serialized.

The SceneManager maintains:
- The material registry (material IDs in insertion order)
- Spheres in insertion order (which decides exact distance ties)
- Point lights
- The checkerboard floor toggle
- JSON-friendly configuration export and import

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from tinytracer.scene.manager import SceneManager
    >>> scene = SceneManager()
    >>> ivory = scene.add_preset_material("ivory")
    >>> scene.add_sphere((-3.0, 0.0, -16.0), 2.0, ivory)
    >>> scene.add_light((-20.0, 20.0, 20.0), 1.5)
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from tinytracer.materials.material import (
    MAX_MATERIALS,
    MaterialParams,
    add_material_params,
    clear_materials,
    get_material_count,
)
from tinytracer.materials.presets import get_preset
from tinytracer.scene.intersection import (
    MAX_SPHERES,
    add_sphere,
    clear_scene,
    get_sphere_count,
    is_checkerboard_enabled,
    set_checkerboard_enabled,
)
from tinytracer.scene.lights import (
    MAX_LIGHTS,
    add_light,
    clear_lights,
    get_light_count,
)


@dataclass
class MaterialInfo:
    """Information about a registered material.

    Attributes:
        material_id: The material ID.
        params: The material parameters as provided during creation.
        name: Preset name, if the material came from a preset.
    """

    material_id: int
    params: MaterialParams
    name: str | None = None


@dataclass
class SphereInfo:
    """Information about a sphere in the scene.

    Attributes:
        sphere_index: The index in the sphere storage arrays.
        center: The center of the sphere.
        radius: The radius of the sphere.
        material_id: The material ID assigned to the sphere.
    """

    sphere_index: int
    center: tuple[float, float, float]
    radius: float
    material_id: int


@dataclass
class LightInfo:
    """Information about a point light in the scene.

    Attributes:
        light_index: The index in the light storage arrays.
        position: The light position.
        intensity: The light intensity.
    """

    light_index: int
    position: tuple[float, float, float]
    intensity: float


@dataclass
class SceneConfig:
    """Configuration for scene serialization.

    Attributes:
        materials: List of material configurations.
        spheres: List of sphere configurations.
        lights: List of light configurations.
        checkerboard: Whether the checkerboard floor is enabled.
    """

    materials: list[dict[str, Any]] = field(default_factory=list)
    spheres: list[dict[str, Any]] = field(default_factory=list)
    lights: list[dict[str, Any]] = field(default_factory=list)
    checkerboard: bool = False


def _vec3(values: Any, default: tuple[float, float, float]) -> tuple[float, float, float]:
    """Convert a sequence from a config into a 3-tuple of floats."""
    if values is None:
        return default
    if len(values) != 3:
        raise ValueError(f"Expected 3 components, got {values!r}")
    return (float(values[0]), float(values[1]), float(values[2]))


def _parse_material(mat_config: dict[str, Any]) -> tuple[MaterialParams, str | None]:
    """Convert a material entry from a config into (params, preset name)."""
    if "preset" in mat_config:
        name = mat_config["preset"]
        return get_preset(name), name

    albedo = mat_config.get("albedo", [1.0, 0.0, 0.0, 0.0])
    if len(albedo) != 4:
        raise ValueError(f"Material albedo needs 4 weights, got {albedo!r}")
    params = MaterialParams(
        diffuse_color=_vec3(mat_config.get("diffuse_color"), (0.0, 0.0, 0.0)),
        albedo=(float(albedo[0]), float(albedo[1]), float(albedo[2]), float(albedo[3])),
        specular_exponent=float(mat_config.get("specular_exponent", 0.0)),
        refractive_index=float(mat_config.get("refractive_index", 1.0)),
    )
    return params, None


class SceneManager:
    """Scene builder owning the global Taichi scene tables.

    Creating a SceneManager clears any previous scene. Only one scene is
    live at a time, since the renderer reads the module-level fields.

    Attributes:
        materials: List of MaterialInfo for all registered materials.
        spheres: List of SphereInfo for all spheres in the scene.
        lights: List of LightInfo for all lights in the scene.

    Example:
        >>> scene = SceneManager()
        >>> glass = scene.add_preset_material("glass")
        >>> scene.add_sphere((-1.0, -1.5, -12.0), 2.0, glass)
        >>> scene.add_light((30.0, 50.0, -25.0), 1.8)
        >>> scene.set_checkerboard(True)
    """

    def __init__(self) -> None:
        """Initialize an empty scene."""
        self.materials: list[MaterialInfo] = []
        self.spheres: list[SphereInfo] = []
        self.lights: list[LightInfo] = []
        self._clear_all()

    def _clear_all(self) -> None:
        """Clear all scene data including Taichi fields."""
        clear_scene()
        clear_materials()
        clear_lights()
        self.materials.clear()
        self.spheres.clear()
        self.lights.clear()

    def clear(self) -> None:
        """Clear the entire scene (primitives, materials, lights, floor)."""
        self._clear_all()

    # =========================================================================
    # Material Management
    # =========================================================================

    def add_material(
        self,
        diffuse_color: tuple[float, float, float],
        albedo: tuple[float, float, float, float],
        specular_exponent: float,
        refractive_index: float = 1.0,
    ) -> int:
        """Add a material to the scene.

        Args:
            diffuse_color: The diffuse color as (R, G, B).
            albedo: The (diffuse, specular, reflection, refraction) weights.
            specular_exponent: Phong shininess exponent.
            refractive_index: Index of refraction.

        Returns:
            The material ID for this material.

        Raises:
            RuntimeError: If the maximum number of materials is exceeded.
        """
        params = MaterialParams(
            diffuse_color=_vec3(diffuse_color, (0.0, 0.0, 0.0)),
            albedo=(float(albedo[0]), float(albedo[1]), float(albedo[2]), float(albedo[3])),
            specular_exponent=float(specular_exponent),
            refractive_index=float(refractive_index),
        )
        return self._register_material(params, None)

    def add_preset_material(self, name: str) -> int:
        """Add one of the named material presets.

        Args:
            name: Preset name ("ivory", "glass", "red_rubber" or "mirror").

        Returns:
            The material ID for this material.

        Raises:
            ValueError: If the preset name is unknown.
            RuntimeError: If the maximum number of materials is exceeded.
        """
        return self._register_material(get_preset(name), name)

    def _register_material(self, params: MaterialParams, name: str | None) -> int:
        material_id = add_material_params(params)
        self.materials.append(MaterialInfo(material_id=material_id, params=params, name=name))
        return material_id

    def get_material_count(self) -> int:
        """Get the total number of materials in the scene."""
        return get_material_count()

    def get_material_info(self, material_id: int) -> MaterialInfo | None:
        """Get information about a material by ID.

        Returns:
            MaterialInfo for the material, or None if not found.
        """
        if 0 <= material_id < len(self.materials):
            return self.materials[material_id]
        return None

    # =========================================================================
    # Primitive Management
    # =========================================================================

    def add_sphere(
        self,
        center: tuple[float, float, float],
        radius: float,
        material_id: int,
    ) -> int:
        """Add a sphere to the scene.

        Args:
            center: The center point of the sphere as (x, y, z).
            radius: The radius of the sphere.
            material_id: The material ID to assign to the sphere.

        Returns:
            The index of the added sphere.

        Raises:
            RuntimeError: If the maximum number of spheres is exceeded.
            ValueError: If material_id is invalid.
        """
        if material_id < 0 or material_id >= get_material_count():
            raise ValueError(f"Invalid material_id: {material_id}")

        center = _vec3(center, (0.0, 0.0, 0.0))
        sphere_index = add_sphere(center, radius, material_id)

        info = SphereInfo(
            sphere_index=sphere_index,
            center=center,
            radius=float(radius),
            material_id=material_id,
        )
        self.spheres.append(info)

        return sphere_index

    def add_sphere_with_preset(
        self,
        center: tuple[float, float, float],
        radius: float,
        preset: str,
    ) -> tuple[int, int]:
        """Add a sphere with a new material taken from a preset.

        Returns:
            Tuple of (sphere_index, material_id).
        """
        material_id = self.add_preset_material(preset)
        sphere_index = self.add_sphere(center, radius, material_id)
        return sphere_index, material_id

    def set_checkerboard(self, enabled: bool) -> None:
        """Enable or disable the checkerboard floor patch."""
        set_checkerboard_enabled(enabled)

    @property
    def checkerboard(self) -> bool:
        """Whether the checkerboard floor patch is enabled."""
        return is_checkerboard_enabled()

    # =========================================================================
    # Light Management
    # =========================================================================

    def add_light(self, position: tuple[float, float, float], intensity: float) -> int:
        """Add a point light to the scene.

        Returns:
            The index of the added light.

        Raises:
            RuntimeError: If the maximum number of lights is exceeded.
        """
        position = _vec3(position, (0.0, 0.0, 0.0))
        light_index = add_light(position, intensity)
        self.lights.append(
            LightInfo(light_index=light_index, position=position, intensity=float(intensity))
        )
        return light_index

    # =========================================================================
    # Scene Queries
    # =========================================================================

    def get_sphere_count(self) -> int:
        """Get the number of spheres in the scene."""
        return get_sphere_count()

    def get_light_count(self) -> int:
        """Get the number of lights in the scene."""
        return get_light_count()

    # =========================================================================
    # Scene Serialization
    # =========================================================================

    def to_config(self) -> SceneConfig:
        """Export the scene to a configuration object."""
        config = SceneConfig(checkerboard=self.checkerboard)

        for mat in self.materials:
            if mat.name is not None:
                config.materials.append({"preset": mat.name})
            else:
                config.materials.append(mat.params.as_dict())

        for sphere in self.spheres:
            config.spheres.append(
                {
                    "center": list(sphere.center),
                    "radius": sphere.radius,
                    "material_id": sphere.material_id,
                }
            )

        for light in self.lights:
            config.lights.append(
                {
                    "position": list(light.position),
                    "intensity": light.intensity,
                }
            )

        return config

    def from_config(self, config: SceneConfig) -> None:
        """Load a scene from a configuration object.

        Every entry is checked before anything is changed, so an invalid
        configuration leaves the current scene untouched. On success the
        current scene is cleared and replaced.

        Args:
            config: The scene configuration to load.

        Raises:
            ValueError: If the configuration contains invalid data or does
                not fit in the scene tables.
        """
        materials = [_parse_material(mat_config) for mat_config in config.materials]

        spheres = []
        for sphere_config in config.spheres:
            material_id = int(sphere_config.get("material_id", 0))
            if not 0 <= material_id < len(materials):
                raise ValueError(f"Invalid material_id: {material_id}")
            spheres.append(
                (
                    _vec3(sphere_config.get("center"), (0.0, 0.0, 0.0)),
                    float(sphere_config.get("radius", 1.0)),
                    material_id,
                )
            )

        lights = [
            (
                _vec3(light_config.get("position"), (0.0, 0.0, 0.0)),
                float(light_config.get("intensity", 1.0)),
            )
            for light_config in config.lights
        ]

        for kind, count, limit in (
            ("materials", len(materials), MAX_MATERIALS),
            ("spheres", len(spheres), MAX_SPHERES),
            ("lights", len(lights), MAX_LIGHTS),
        ):
            if count > limit:
                raise ValueError(f"Scene has {count} {kind}, maximum is {limit}")

        self.clear()

        # Materials first, spheres refer to them by ID
        for params, name in materials:
            self._register_material(params, name)
        for center, radius, material_id in spheres:
            self.add_sphere(center, radius, material_id)
        for position, intensity in lights:
            self.add_light(position, intensity)

        self.set_checkerboard(bool(config.checkerboard))

    def to_dict(self) -> dict[str, Any]:
        """Export the scene to a dictionary (for JSON serialization)."""
        config = self.to_config()
        return {
            "materials": config.materials,
            "spheres": config.spheres,
            "lights": config.lights,
            "checkerboard": config.checkerboard,
        }

    def from_dict(self, data: dict[str, Any]) -> None:
        """Load a scene from a dictionary.

        Args:
            data: Dictionary with 'materials', 'spheres', 'lights' and
                'checkerboard' keys (all optional).
        """
        config = SceneConfig(
            materials=data.get("materials", []),
            spheres=data.get("spheres", []),
            lights=data.get("lights", []),
            checkerboard=data.get("checkerboard", False),
        )
        self.from_config(config)

    def save_json(self, filepath: str | Path) -> None:
        """Write the scene to a JSON file."""
        Path(filepath).write_text(json.dumps(self.to_dict(), indent=2))

    def load_json(self, filepath: str | Path) -> None:
        """Replace the scene with the contents of a JSON file.

        Raises:
            ValueError: If the file is not valid JSON or describes an
                invalid scene.
        """
        try:
            data = json.loads(Path(filepath).read_text())
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid scene file {filepath}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Invalid scene file {filepath}: top level must be an object")
        self.from_dict(data)

    # =========================================================================
    # Capacity Information
    # =========================================================================

    @staticmethod
    def get_max_spheres() -> int:
        """Get the maximum number of spheres supported."""
        return MAX_SPHERES

    @staticmethod
    def get_max_lights() -> int:
        """Get the maximum number of lights supported."""
        return MAX_LIGHTS

    @staticmethod
    def get_max_materials() -> int:
        """Get the maximum number of materials supported."""
        return MAX_MATERIALS
