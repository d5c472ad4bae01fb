"""Pinhole camera model for primary ray generation.

One ray is cast through the center of each pixel. Pixel coordinates are
mapped to a camera-space direction the same way for every image size:

    x = (i + 0.5) - width / 2
    y = -(j + 0.5) + height / 2
    z = -height / (2 * tan(vfov / 2))

so row ``j = 0`` is the top of the image and the vertical field of view
spans exactly the image height. The direction is then rotated into world
space by the camera's orthonormal basis (u, v, w) and normalized.

The basis is built from look-at parameters:
- w: points from lookat toward lookfrom (opposite view direction)
- u: points right in the image plane
- v: points up in the image plane

With the default parameters (at the origin, looking down -z, y up) the basis
is the identity.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from tinytracer.camera.pinhole import PinholeCamera, setup_camera
    >>> setup_camera(PinholeCamera(vfov=60.0))
    >>> # Call get_primary_ray(i, j, width, height) inside a Taichi kernel
"""

import math
from dataclasses import dataclass

import numpy as np
import taichi as ti
import taichi.math as tm

from tinytracer.core.ray import Ray, make_ray, normalize, vec3

# =============================================================================
# Camera Data Structures
# =============================================================================


@dataclass
class PinholeCamera:
    """Configuration for a pinhole (perspective) camera.

    Attributes:
        lookfrom: Camera position in world space (x, y, z).
        lookat: Point the camera is looking at in world space (x, y, z).
        vup: Up direction vector for camera orientation.
        vfov: Vertical field of view in degrees.
    """

    lookfrom: tuple[float, float, float] = (0.0, 0.0, 0.0)
    lookat: tuple[float, float, float] = (0.0, 0.0, -1.0)
    vup: tuple[float, float, float] = (0.0, 1.0, 0.0)
    vfov: float = 60.0


# =============================================================================
# Taichi Fields for Camera State
# =============================================================================

_camera_origin = ti.Vector.field(3, dtype=ti.f64, shape=())

# Orthonormal basis vectors
_camera_u = ti.Vector.field(3, dtype=ti.f64, shape=())  # Right
_camera_v = ti.Vector.field(3, dtype=ti.f64, shape=())  # Up
_camera_w = ti.Vector.field(3, dtype=ti.f64, shape=())  # Backward (opposite view)

# tan(vfov / 2)
_tan_half_fov = ti.field(dtype=ti.f64, shape=())


# =============================================================================
# Camera Setup (Python-side)
# =============================================================================


def setup_camera(camera: PinholeCamera) -> None:
    """Initialize camera state from configuration.

    Computes the camera's orthonormal basis and stores it, together with the
    field of view, in Taichi fields. Must be called before rendering.

    Args:
        camera: Camera configuration with position, orientation, and FOV.

    Raises:
        ValueError: If lookfrom equals lookat or vup is parallel to the
            view direction (the basis would be degenerate).
    """
    lookfrom = np.array(camera.lookfrom, dtype=np.float64)
    lookat = np.array(camera.lookat, dtype=np.float64)
    vup = np.array(camera.vup, dtype=np.float64)

    # w points from lookat toward lookfrom (backward)
    w = lookfrom - lookat
    w_norm = np.linalg.norm(w)
    if w_norm == 0.0:
        raise ValueError("Camera lookfrom and lookat must differ")
    w = w / w_norm

    # u points right (perpendicular to w and vup)
    u = np.cross(vup, w)
    u_norm = np.linalg.norm(u)
    if u_norm == 0.0:
        raise ValueError("Camera vup must not be parallel to the view direction")
    u = u / u_norm

    # v points up in the camera's frame
    v = np.cross(w, u)

    _camera_origin[None] = lookfrom.tolist()
    _camera_u[None] = u.tolist()
    _camera_v[None] = v.tolist()
    _camera_w[None] = w.tolist()
    _tan_half_fov[None] = math.tan(math.radians(camera.vfov) / 2.0)


# =============================================================================
# Ray Generation (Taichi-side)
# =============================================================================


@ti.func
def get_primary_ray(pixel_i: ti.i32, pixel_j: ti.i32, width: ti.i32, height: ti.i32) -> Ray:
    """Generate the ray through the center of pixel (i, j).

    Args:
        pixel_i: Pixel column (0 = left).
        pixel_j: Pixel row (0 = top).
        width: Image width in pixels.
        height: Image height in pixels.

    Returns:
        A Ray from the camera position with a unit direction.
    """
    w_f = ti.cast(width, ti.f64)
    h_f = ti.cast(height, ti.f64)

    x = (ti.cast(pixel_i, ti.f64) + 0.5) - w_f / 2.0
    y = -(ti.cast(pixel_j, ti.f64) + 0.5) + h_f / 2.0
    z = -h_f / (2.0 * _tan_half_fov[None])

    direction = normalize(x * _camera_u[None] + y * _camera_v[None] + z * _camera_w[None])
    return make_ray(_camera_origin[None], direction)


@ti.func
def get_camera_origin() -> vec3:
    """Get the camera origin (position) in world space."""
    return _camera_origin[None]


# =============================================================================
# Utility Functions
# =============================================================================


def get_camera_info() -> dict[str, tuple[float, ...]]:
    """Get current camera state for debugging.

    Returns:
        Dictionary with origin, u, v, w and tan_half_fov.
    """
    origin_vec = _camera_origin[None]
    u_vec = _camera_u[None]
    v_vec = _camera_v[None]
    w_vec = _camera_w[None]

    return {
        "origin": (float(origin_vec[0]), float(origin_vec[1]), float(origin_vec[2])),
        "u": (float(u_vec[0]), float(u_vec[1]), float(u_vec[2])),
        "v": (float(v_vec[0]), float(v_vec[1]), float(v_vec[2])),
        "w": (float(w_vec[0]), float(w_vec[1]), float(w_vec[2])),
        "tan_half_fov": (float(_tan_half_fov[None]),),
    }


def project_to_pixel(
    point: tuple[float, float, float],
    camera: PinholeCamera,
    width: int,
    height: int,
) -> tuple[int, int]:
    """Find the pixel whose center ray passes closest to a world point.

    Inverse of the primary ray mapping, computed on the host. Useful for
    locating objects in a rendered image.

    Args:
        point: World-space point in front of the camera.
        camera: The camera configuration.
        width: Image width in pixels.
        height: Image height in pixels.

    Returns:
        The (i, j) pixel coordinates (may fall outside the image).

    Raises:
        ValueError: If the point is not in front of the camera.
    """
    lookfrom = np.array(camera.lookfrom, dtype=np.float64)
    lookat = np.array(camera.lookat, dtype=np.float64)
    vup = np.array(camera.vup, dtype=np.float64)

    w = lookfrom - lookat
    w = w / np.linalg.norm(w)
    u = np.cross(vup, w)
    u = u / np.linalg.norm(u)
    v = np.cross(w, u)

    rel = np.array(point, dtype=np.float64) - lookfrom
    cam_x, cam_y, cam_z = float(rel @ u), float(rel @ v), float(rel @ w)
    if cam_z >= 0.0:
        raise ValueError(f"Point {point} is behind the camera")

    focal = height / (2.0 * math.tan(math.radians(camera.vfov) / 2.0))
    scale = focal / -cam_z
    x = cam_x * scale
    y = cam_y * scale

    i = math.floor(x + width / 2.0)
    j = math.floor(height / 2.0 - y)
    return i, j
