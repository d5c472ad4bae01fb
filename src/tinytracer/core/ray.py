"""Ray data structure and vector utilities for Whitted-style ray tracing.

This module provides the fundamental Ray dataclass and the vector algebra
used by the intersection and shading code. All operations are designed to
work within Taichi kernels. Taichi should be initialized with
``default_fp=ti.f64`` so vector components are 64-bit floats.

Every function here is total: there are no error conditions, degenerate
inputs simply produce whatever the arithmetic yields.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> origin = ti.math.vec3(0.0, 0.0, 0.0)
    >>> direction = ti.math.vec3(0.0, 0.0, -1.0)
    >>> ray = Ray(origin=origin, direction=direction)
    >>> point = ray_at(ray, 5.0)  # Point 5 units along the ray
"""

import taichi as ti
import taichi.math as tm

# Type aliases using Taichi's math module
vec3 = tm.vec3
# Albedo weights: (diffuse, specular, reflection, refraction)
vec4 = tm.vec4


@ti.dataclass
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray (vec3).
        direction: The direction vector of the ray (vec3). Expected to be
            unit length by the intersection routines.
    """

    origin: vec3
    direction: vec3


@ti.func
def ray_at(ray: Ray, t: ti.f64) -> vec3:
    """Compute the point along the ray at parameter t."""
    return ray.origin + t * ray.direction


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    """Create a ray from origin and direction."""
    return Ray(origin=origin, direction=direction)


# =============================================================================
# Vector Utility Functions
# =============================================================================


@ti.func
def dot(a: vec3, b: vec3) -> ti.f64:
    """Compute the dot product of two vectors."""
    return a.x * b.x + a.y * b.y + a.z * b.z


@ti.func
def cross(a: vec3, b: vec3) -> vec3:
    """Compute the cross product a x b."""
    return vec3(
        a.y * b.z - a.z * b.y,
        a.z * b.x - a.x * b.z,
        a.x * b.y - a.y * b.x,
    )


@ti.func
def magnitude(v: vec3) -> ti.f64:
    """Compute the Euclidean length of a vector."""
    return ti.sqrt(dot(v, v))


@ti.func
def normalize(v: vec3) -> vec3:
    """Normalize a vector to unit length.

    Unlike ``tm.normalize`` this never divides by zero: a zero-length
    vector is returned unchanged.

    Args:
        v: The input vector.

    Returns:
        ``v * (1 / |v|)``, or ``v`` itself when ``|v| == 0``.
    """
    length = magnitude(v)
    result = v
    if length > 0.0:
        result = v * (1.0 / length)
    return result


@ti.func
def reflect(incident: vec3, normal: vec3) -> vec3:
    """Reflect an incident vector about a normal.

    Computes ``I - 2 * dot(I, N) * N``. The normal should be unit length
    for the result to preserve the length of the incident vector.

    Args:
        incident: The incoming direction vector (pointing toward the surface).
        normal: The surface normal (should be normalized).

    Returns:
        The reflected direction vector.
    """
    return incident - 2.0 * dot(incident, normal) * normal


@ti.func
def refract(incident: vec3, normal: vec3, eta_t: ti.f64, eta_i: ti.f64) -> vec3:
    """Refract an incident vector through a surface using Snell's law.

    The normal is the outward surface normal. When the ray travels against
    it (``cos_i`` negative after clamping) the ray is leaving the medium, so
    the normal is flipped and the two refractive indices are swapped.

    Total internal reflection does not produce a reflected ray: the sentinel
    direction ``(1, 0, 0)`` is returned instead.

    Args:
        incident: The incoming direction (should be normalized).
        normal: The outward surface normal (should be normalized).
        eta_t: Refractive index of the medium on the inner side of the normal.
        eta_i: Refractive index of the medium on the outer side (1.0 for air).

    Returns:
        The refracted direction, or ``(1, 0, 0)`` on total internal reflection.
    """
    cos_i = -tm.clamp(dot(incident, normal), -1.0, 1.0)
    n = normal
    eta_from = eta_i
    eta_to = eta_t
    if cos_i < 0.0:
        # Leaving the medium
        cos_i = -cos_i
        n = -normal
        eta_from = eta_t
        eta_to = eta_i

    eta = eta_from / eta_to
    k = 1.0 - eta * eta * (1.0 - cos_i * cos_i)
    result = vec3(1.0, 0.0, 0.0)
    if k >= 0.0:
        result = eta * incident + (eta * cos_i - ti.sqrt(k)) * n
    return result


@ti.func
def clamp_channel(c: ti.f64) -> ti.i32:
    """Quantize a linear channel value to an 8-bit integer.

    Computes ``round(255 * clamp(c, 0, 1))``.
    """
    return ti.cast(ti.round(255.0 * tm.clamp(c, 0.0, 1.0)), ti.i32)
