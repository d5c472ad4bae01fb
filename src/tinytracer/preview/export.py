"""Image export utilities for rendered images.

Supported formats:
    - PNG (8-bit RGB via Pillow)

Example:
    >>> from tinytracer.preview.export import save_png
    >>> from tinytracer.core.renderer import Renderer
    >>>
    >>> renderer = Renderer(1024, 768)
    >>> renderer.render()
    >>> save_png(renderer, "render.png")
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

from tinytracer.preview.display import clamp_channels, normalize_overexposed

if TYPE_CHECKING:
    from tinytracer.core.renderer import Renderer


def image_to_uint8(
    image: npt.NDArray[np.floating],
) -> npt.NDArray[np.uint8]:
    """Convert a linear image to 8-bit channels.

    Applies overexposure normalization, then clamps and quantizes each
    channel.

    Args:
        image: Linear image array of shape (H, W, 3).

    Returns:
        8-bit image array of shape (H, W, 3).
    """
    return clamp_channels(normalize_overexposed(image))


def save_png_from_array(
    image: npt.NDArray[np.floating],
    filepath: str | Path,
) -> None:
    """Save a linear image array as a PNG file.

    Args:
        image: Linear image array of shape (H, W, 3).
        filepath: Output file path (should end in .png).
    """
    image_uint8 = image_to_uint8(image)

    pil_image = PILImage.fromarray(image_uint8)
    pil_image.save(filepath)


def save_png(
    renderer: Renderer,
    filepath: str | Path,
) -> None:
    """Save the renderer's current image as a PNG file.

    Args:
        renderer: The Renderer whose framebuffer should be saved.
        filepath: Output file path (should end in .png).
    """
    save_png_from_array(renderer.get_image_numpy(), filepath)
