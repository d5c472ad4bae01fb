"""Scene-level primitive intersection testing.

This module resolves a ray against the whole scene: every sphere in insertion
order, then the optional checkerboard floor. It returns the nearest hit
together with the material of the hit surface.

Rules:
    - Candidates replace the current best only when strictly closer, so the
      first sphere encountered wins an exact tie.
    - The floor overrides a sphere only when strictly closer.
    - Anything at or beyond MAX_DISTANCE counts as a miss.

The scene stores primitives in Taichi fields. intersect_scene reads them
but never writes, so any number of pixels can query the scene concurrently.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from tinytracer.materials.material import add_material
    >>> from tinytracer.scene.intersection import add_sphere, intersect_scene, clear_scene
    >>> clear_scene()
    >>> ivory = add_material((0.4, 0.4, 0.3), (0.6, 0.3, 0.1, 0.0), 50.0)
    >>> add_sphere((-3.0, 0.0, -16.0), 2.0, material_id=ivory)
    >>> # Use intersect_scene within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from tinytracer.geometry.plane import (
    FLOOR_ALBEDO,
    FLOOR_REFRACTIVE_INDEX,
    FLOOR_SPECULAR_EXPONENT,
    checker_color,
    hit_checkerboard,
)
from tinytracer.geometry.sphere import Sphere, hit_sphere
from tinytracer.materials.material import Material, get_material

# Type aliases
vec3 = tm.vec3
vec4 = tm.vec4

# Hits at or beyond this distance are treated as misses
MAX_DISTANCE = 1000.0

# Initial "closest so far" distance, larger than any real hit
_FAR = 1.0e30


@ti.dataclass
class SceneHitRecord:
    """Record of a ray-scene intersection with the resolved material.

    Attributes:
        hit: Whether the ray intersected anything within MAX_DISTANCE
            (1 if hit, 0 if miss). No other field may be read on a miss.
        t: The distance along the ray to the intersection.
        point: The 3D point where the ray intersected the surface.
        normal: The outward surface normal at the hit point (unit length).
        material: A copy of the material of the hit surface.
    """

    hit: ti.i32
    t: ti.f64
    point: vec3
    normal: vec3
    material: Material


# Maximum number of spheres supported in the scene
MAX_SPHERES = 1024

# Sphere storage: Structure of Arrays layout
sphere_centers = ti.Vector.field(3, dtype=ti.f64, shape=MAX_SPHERES)
sphere_radii = ti.field(dtype=ti.f64, shape=MAX_SPHERES)
sphere_material_ids = ti.field(dtype=ti.i32, shape=MAX_SPHERES)
num_spheres = ti.field(dtype=ti.i32, shape=())

# Checkerboard floor toggle
checkerboard_enabled = ti.field(dtype=ti.i32, shape=())


def clear_scene() -> None:
    """Clear all primitives from the scene and disable the floor.

    Resets the primitive count to zero. The actual field data is not
    cleared but will be overwritten when new primitives are added.
    """
    num_spheres[None] = 0
    checkerboard_enabled[None] = 0


def add_sphere(center: tuple[float, float, float], radius: float, material_id: int = 0) -> int:
    """Add a sphere to the scene.

    Spheres are tested in insertion order. The radius is not validated.

    Args:
        center: The center point of the sphere.
        radius: The radius of the sphere.
        material_id: The material ID to associate with this sphere.

    Returns:
        The index of the added sphere.

    Raises:
        RuntimeError: If the maximum number of spheres is exceeded.
    """
    idx = num_spheres[None]
    if idx >= MAX_SPHERES:
        raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")
    sphere_centers[idx] = [float(c) for c in center]
    sphere_radii[idx] = float(radius)
    sphere_material_ids[idx] = material_id
    num_spheres[None] = idx + 1
    return idx


def get_sphere_count() -> int:
    """Get the number of spheres in the scene."""
    return int(num_spheres[None])


def set_checkerboard_enabled(enabled: bool) -> None:
    """Enable or disable the checkerboard floor patch."""
    checkerboard_enabled[None] = 1 if enabled else 0


def is_checkerboard_enabled() -> bool:
    """Check whether the checkerboard floor patch is part of the scene."""
    return bool(checkerboard_enabled[None])


@ti.func
def _make_miss_record() -> SceneHitRecord:
    """Create a SceneHitRecord indicating no intersection."""
    return SceneHitRecord(
        hit=0,
        t=0.0,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        material=Material(
            diffuse_color=vec3(0.0, 0.0, 0.0),
            albedo=vec4(0.0, 0.0, 0.0, 0.0),
            specular_exponent=0.0,
            refractive_index=1.0,
        ),
    )


@ti.func
def _floor_material(point: vec3) -> Material:
    """Material of the checkerboard floor at a given point."""
    return Material(
        diffuse_color=checker_color(point),
        albedo=vec4(FLOOR_ALBEDO[0], FLOOR_ALBEDO[1], FLOOR_ALBEDO[2], FLOOR_ALBEDO[3]),
        specular_exponent=FLOOR_SPECULAR_EXPONENT,
        refractive_index=FLOOR_REFRACTIVE_INDEX,
    )


@ti.func
def intersect_scene(ray_origin: vec3, ray_direction: vec3) -> SceneHitRecord:
    """Find the nearest intersection of a ray with the scene.

    Brute-force linear scan over all spheres followed by the floor patch
    (when enabled).

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The unit direction of the ray.

    Returns:
        A SceneHitRecord for the closest surface, or a miss record if nothing
        was hit closer than MAX_DISTANCE.
    """
    closest_t = _FAR
    result = _make_miss_record()

    n_spheres = num_spheres[None]
    for i in range(n_spheres):
        sphere = Sphere(center=sphere_centers[i], radius=sphere_radii[i])
        rec = hit_sphere(ray_origin, ray_direction, sphere)
        if rec.hit == 1 and rec.t < closest_t:
            closest_t = rec.t
            result = SceneHitRecord(
                hit=1,
                t=rec.t,
                point=rec.point,
                normal=rec.normal,
                material=get_material(sphere_material_ids[i]),
            )

    if checkerboard_enabled[None] == 1:
        rec = hit_checkerboard(ray_origin, ray_direction)
        if rec.hit == 1 and rec.t < closest_t:
            closest_t = rec.t
            result = SceneHitRecord(
                hit=1,
                t=rec.t,
                point=rec.point,
                normal=rec.normal,
                material=_floor_material(rec.point),
            )

    if closest_t >= MAX_DISTANCE:
        result = _make_miss_record()

    return result
