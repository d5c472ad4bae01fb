"""Framebuffer post-processing and Matplotlib preview.

The renderer produces linear, unclamped colors. Before display or export
each pixel goes through:

1. Overexposure normalization: if any channel exceeds 1, the whole pixel
   is divided by its largest channel, preserving hue.
2. Clamping to [0, 1] and quantization to 8 bits:
   ``round(255 * clamp(c, 0, 1))``.

There is no gamma step.

Example:
    >>> from tinytracer.preview.display import process_image_for_display, show_preview
    >>> display = process_image_for_display(renderer.get_image_numpy())
    >>> show_preview(display, title="classic")
"""

from __future__ import annotations

import numpy as np
import numpy.typing as npt


def normalize_overexposed(
    image: npt.NDArray[np.floating],
) -> npt.NDArray[np.float64]:
    """Scale down pixels whose brightest channel exceeds 1.

    Args:
        image: Linear image array of shape (H, W, 3).

    Returns:
        Image of the same shape where every pixel with max channel > 1 has
        been divided by that max channel. Other pixels are unchanged.
    """
    result = np.asarray(image, dtype=np.float64).copy()

    max_channel = result.max(axis=-1, keepdims=True)
    over = max_channel > 1.0
    result = np.where(over, result / np.where(over, max_channel, 1.0), result)

    return result


def clamp_channels(
    image: npt.NDArray[np.floating],
) -> npt.NDArray[np.uint8]:
    """Clamp channels to [0, 1] and quantize to 8 bits.

    Computes ``round(255 * clamp(c, 0, 1))`` per channel.

    Args:
        image: Image array of any shape.

    Returns:
        Array of the same shape with dtype uint8.
    """
    clipped = np.clip(np.asarray(image, dtype=np.float64), 0.0, 1.0)
    # Round half up, like the device-side clamp_channel
    return np.floor(clipped * 255.0 + 0.5).astype(np.uint8)


def process_image_for_display(
    image: npt.NDArray[np.floating],
) -> npt.NDArray[np.float64]:
    """Tone map a linear image into the displayable [0, 1] range.

    Args:
        image: Linear image array of shape (H, W, 3).

    Returns:
        Normalized image clamped to [0, 1].
    """
    result = normalize_overexposed(image)
    return np.clip(result, 0.0, 1.0)


def show_preview(
    image: npt.NDArray[np.floating],
    *,
    title: str | None = None,
    figsize: tuple[float, float] = (10.24, 7.68),
    block: bool = True,
) -> None:
    """Display a rendered image in a Matplotlib window.

    The image is tone mapped with process_image_for_display first.

    Args:
        image: Linear image array of shape (H, W, 3).
        title: Optional figure title.
        figsize: Figure size in inches (width, height).
        block: Whether to block execution until figure is closed.
    """
    import matplotlib.pyplot as plt

    display_image = process_image_for_display(image)

    fig, ax = plt.subplots(1, 1, figsize=figsize)
    ax.imshow(display_image)
    ax.axis("off")
    if title is not None:
        ax.set_title(title)

    plt.tight_layout()
    plt.show(block=block)
