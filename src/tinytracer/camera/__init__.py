"""Camera module for primary ray generation.

Components:
    pinhole: Pinhole (perspective) camera with look-at positioning

One ray is generated through the center of each pixel; pixel (0, 0) is the
top-left corner of the image.
"""

from .pinhole import (
    PinholeCamera,
    get_camera_info,
    get_camera_origin,
    get_primary_ray,
    project_to_pixel,
    setup_camera,
)

__all__ = [
    "PinholeCamera",
    "setup_camera",
    "get_primary_ray",
    "get_camera_origin",
    "get_camera_info",
    "project_to_pixel",
]
