"""Sphere primitive with geometric ray-sphere intersection.

This module provides a Sphere dataclass and an intersection function based on
the geometric (projection) formulation rather than the quadratic formula:

    L   = C - O                 vector from ray origin to sphere center
    tca = dot(L, D)             projection of L onto the ray direction
    d2  = dot(L, L) - tca^2     squared distance from center to the ray
    thc = sqrt(r^2 - d2)        half chord length
    t0, t1 = tca -/+ thc

Rays whose origin lies past the sphere center along the ray direction
(``tca < 0``) are reported as misses, even when the origin is inside the
sphere. Rendering relies on this exact behavior, so it is kept as is.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from tinytracer.geometry.sphere import Sphere, HitRecord, hit_sphere
    >>> sphere = Sphere(center=ti.math.vec3(0, 0, -16), radius=2.0)
    >>> # Use hit_sphere within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from tinytracer.core.ray import dot, normalize

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class Sphere:
    """A sphere defined by center point and radius.

    Attributes:
        center: The center point of the sphere (vec3).
        radius: The radius of the sphere. Not validated.
    """

    center: vec3
    radius: ti.f64


@ti.dataclass
class HitRecord:
    """Record of a ray-primitive intersection.

    Attributes:
        hit: Whether the ray intersected the primitive (1 if hit, 0 if miss).
        t: The distance along the ray to the intersection.
            Only valid if hit == 1.
        point: The 3D point where the ray intersected the surface.
            Only valid if hit == 1.
        normal: The outward surface normal at the intersection point
            (unit length). Only valid if hit == 1.
    """

    hit: ti.i32
    t: ti.f64
    point: vec3
    normal: vec3


@ti.func
def make_miss() -> HitRecord:
    """Create a HitRecord indicating no intersection."""
    return HitRecord(
        hit=0,
        t=0.0,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
    )


@ti.func
def intersect_sphere_distance(ray_origin: vec3, ray_direction: vec3, sphere: Sphere):
    """Find the nearest non-negative ray parameter hitting the sphere.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The unit direction of the ray.
        sphere: The sphere to test.

    Returns:
        A tuple ``(did_hit, t)``. ``t`` is only meaningful when ``did_hit``
        is 1.
    """
    did_hit = 0
    t = 0.0

    to_center = sphere.center - ray_origin
    tca = dot(to_center, ray_direction)

    if tca >= 0.0:
        d2 = dot(to_center, to_center) - tca * tca
        r2 = sphere.radius * sphere.radius

        if d2 <= r2:
            thc = ti.sqrt(r2 - d2)
            t = tca - thc
            t1 = tca + thc

            if t < 0.0:
                t = t1

            if t >= 0.0:
                did_hit = 1

    return did_hit, t


@ti.func
def hit_sphere(ray_origin: vec3, ray_direction: vec3, sphere: Sphere) -> HitRecord:
    """Test for ray-sphere intersection.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The unit direction of the ray.
        sphere: The sphere to test intersection against.

    Returns:
        A HitRecord with the nearest non-negative hit. Check the hit field
        to determine if an intersection occurred.
    """
    result = make_miss()

    did_hit, t = intersect_sphere_distance(ray_origin, ray_direction, sphere)
    if did_hit == 1:
        point = ray_origin + t * ray_direction
        result = HitRecord(
            hit=1,
            t=t,
            point=point,
            normal=normalize(point - sphere.center),
        )

    return result


@ti.func
def make_sphere(center: vec3, radius: ti.f64) -> Sphere:
    """Create a sphere from center and radius."""
    return Sphere(center=center, radius=radius)
