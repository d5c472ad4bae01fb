"""Checkerboard floor patch with ray-plane intersection.

The floor is the horizontal plane ``y = FLOOR_Y`` clipped to a finite patch:
``|x| < FLOOR_HALF_WIDTH`` and ``FLOOR_Z_FAR < z < FLOOR_Z_NEAR``. Rays
almost parallel to the plane (``|D.y| <= PARALLEL_EPSILON``) never hit it.

Tiles are two units wide. Tile parity is

    (floor(0.5 * x + 1000) + floor(0.5 * z)) mod 2

where the offset of 1000 keeps the first term positive across the patch.
Odd tiles are light gray, even tiles are brown.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from tinytracer.geometry.plane import hit_checkerboard
    >>> # Use hit_checkerboard within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from .sphere import HitRecord, make_miss

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

FLOOR_Y = -4.0
FLOOR_HALF_WIDTH = 10.0
FLOOR_Z_NEAR = -10.0
FLOOR_Z_FAR = -30.0
PARALLEL_EPSILON = 1e-3

# Tile colors
CHECKER_LIGHT = (0.3, 0.3, 0.3)
CHECKER_DARK = (0.3, 0.2, 0.1)

# Fixed floor material parameters
FLOOR_ALBEDO = (1.0, 0.2, 0.0, 0.0)
FLOOR_SPECULAR_EXPONENT = 50.0
FLOOR_REFRACTIVE_INDEX = 1.0


@ti.func
def hit_checkerboard(ray_origin: vec3, ray_direction: vec3) -> HitRecord:
    """Test a ray against the checkerboard floor patch.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The unit direction of the ray.

    Returns:
        A HitRecord with the upward normal (0, 1, 0) when the ray lands on
        the patch in front of its origin, otherwise a miss record.
    """
    result = make_miss()

    if ti.abs(ray_direction.y) > PARALLEL_EPSILON:
        d = -(ray_origin.y - FLOOR_Y) / ray_direction.y
        point = ray_origin + d * ray_direction
        if (
            d > 0.0
            and ti.abs(point.x) < FLOOR_HALF_WIDTH
            and point.z < FLOOR_Z_NEAR
            and point.z > FLOOR_Z_FAR
        ):
            result = HitRecord(
                hit=1,
                t=d,
                point=point,
                normal=vec3(0.0, 1.0, 0.0),
            )

    return result


@ti.func
def checker_parity(point: vec3) -> ti.i32:
    """Return the tile parity (0 or 1) of a point on the floor."""
    tile_x = ti.cast(ti.floor(0.5 * point.x + 1000.0), ti.i32)
    tile_z = ti.cast(ti.floor(0.5 * point.z), ti.i32)
    return (tile_x + tile_z) % 2


@ti.func
def checker_color(point: vec3) -> vec3:
    """Diffuse color of the floor tile containing point."""
    color = vec3(CHECKER_DARK[0], CHECKER_DARK[1], CHECKER_DARK[2])
    if checker_parity(point) == 1:
        color = vec3(CHECKER_LIGHT[0], CHECKER_LIGHT[1], CHECKER_LIGHT[2])
    return color
