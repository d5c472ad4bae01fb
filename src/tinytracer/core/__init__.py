"""Core rendering module.

Components:
    ray: Ray data structure and vector algebra (dot, cross, reflect, refract)
    integrator: Whitted-style shading, render target and rendering kernels
    renderer: Row-banded renderer with progress reporting

All compute-intensive operations use Taichi kernels.
"""

from .ray import (
    Ray,
    clamp_channel,
    cross,
    dot,
    magnitude,
    make_ray,
    normalize,
    ray_at,
    reflect,
    refract,
    vec3,
    vec4,
)

# Note: integrator and renderer are NOT imported here to avoid circular imports.
# Import directly from tinytracer.core.integrator or tinytracer.core.renderer.

__all__ = [
    "Ray",
    "ray_at",
    "make_ray",
    "vec3",
    "vec4",
    "dot",
    "cross",
    "magnitude",
    "normalize",
    "reflect",
    "refract",
    "clamp_channel",
]
