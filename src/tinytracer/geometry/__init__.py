"""Geometry module for shape primitives.

Components:
    sphere: Sphere primitive with geometric ray-sphere intersection
    plane: Finite checkerboard floor patch

Intersection routines are Taichi functions (@ti.func) returning a HitRecord:
    rec = hit_shape(ray_origin, ray_direction, ...)
    if rec.hit == 1: use rec.t, rec.point, rec.normal
"""

from .plane import checker_color, checker_parity, hit_checkerboard
from .sphere import HitRecord, Sphere, hit_sphere, make_miss, make_sphere

__all__ = [
    "Sphere",
    "HitRecord",
    "hit_sphere",
    "make_sphere",
    "make_miss",
    "hit_checkerboard",
    "checker_parity",
    "checker_color",
]
