"""Preview module for framebuffer output.

Components:
    display: Overexposure normalization, 8-bit quantization, Matplotlib preview
    export: PNG export via Pillow

Example:
    >>> from tinytracer.preview import save_png, show_preview
    >>> from tinytracer.core.renderer import Renderer
    >>>
    >>> renderer = Renderer(1024, 768)
    >>> renderer.render()
    >>> show_preview(renderer.get_image_numpy())
    >>> save_png(renderer, "render.png")
"""

from tinytracer.preview.display import (
    clamp_channels,
    normalize_overexposed,
    process_image_for_display,
    show_preview,
)
from tinytracer.preview.export import (
    image_to_uint8,
    save_png,
    save_png_from_array,
)

__all__ = [
    "show_preview",
    "normalize_overexposed",
    "clamp_channels",
    "process_image_for_display",
    "save_png",
    "save_png_from_array",
    "image_to_uint8",
]
