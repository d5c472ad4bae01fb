"""Row-banded renderer with progress reporting.

This module wraps the integrator's render target in a small class that:
- Renders the image in bands of rows
- Reports progress through a callback or a generator
- Exposes the result as a NumPy array or an 8-bit image

Each band is one parallel kernel launch, so the band size only trades
progress granularity against launch overhead; the image is identical for
every band size.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from tinytracer.core.renderer import Renderer
    >>> from tinytracer.scene.presets import create_classic_scene
    >>> from tinytracer.camera.pinhole import setup_camera
    >>>
    >>> scene, camera = create_classic_scene()
    >>> setup_camera(camera)
    >>>
    >>> renderer = Renderer(1024, 768)
    >>> renderer.render(rows_per_batch=64)
    >>> image = renderer.get_image_numpy()
"""

from collections.abc import Callable, Generator

import numpy as np
import numpy.typing as npt

from tinytracer.core.integrator import (
    clear_render_target,
    get_image_numpy,
    render_rows,
    setup_render_target,
)
from tinytracer.preview.display import process_image_for_display
from tinytracer.preview.export import image_to_uint8

# Callback receives (rows_done, total_rows)
ProgressCallback = Callable[[int, int], None]


class Renderer:
    """Renders the current scene into a fixed-size framebuffer.

    The renderer keeps the image dimensions and delegates to the global
    integrator buffer (a Taichi field).

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
    """

    def __init__(self, width: int, height: int) -> None:
        """Initialize the renderer.

        Args:
            width: Image width in pixels (max 2048).
            height: Image height in pixels (max 2048).

        Raises:
            ValueError: If dimensions are out of range.
        """
        self._width = width
        self._height = height
        self._rows_done = 0
        setup_render_target(width, height)

    @property
    def width(self) -> int:
        """Get the image width."""
        return self._width

    @property
    def height(self) -> int:
        """Get the image height."""
        return self._height

    @property
    def rows_done(self) -> int:
        """Number of rows rendered since the last reset."""
        return self._rows_done

    @property
    def is_complete(self) -> bool:
        """Whether every row has been rendered."""
        return self._rows_done >= self._height

    def reset(self) -> None:
        """Clear the framebuffer so the image can be rendered again."""
        clear_render_target()
        self._rows_done = 0

    def resize(self, width: int, height: int) -> None:
        """Resize the render target and clear it.

        Raises:
            ValueError: If dimensions are out of range.
        """
        setup_render_target(width, height)
        self._width = width
        self._height = height
        self._rows_done = 0

    def render(
        self,
        rows_per_batch: int | None = None,
        callback: ProgressCallback | None = None,
    ) -> None:
        """Render the whole image.

        Args:
            rows_per_batch: Number of rows per kernel launch. Defaults to the
                full image height (a single launch).
            callback: Optional callback called after each batch with
                (rows_done, total_rows).

        Raises:
            ValueError: If rows_per_batch is not positive.
        """
        for rows_done, total in self.render_progressive(rows_per_batch):
            if callback is not None:
                callback(rows_done, total)

    def render_progressive(
        self,
        rows_per_batch: int | None = None,
    ) -> Generator[tuple[int, int], None, None]:
        """Render the image band by band, yielding progress after each band.

        Args:
            rows_per_batch: Number of rows per kernel launch. Defaults to the
                full image height.

        Yields:
            Tuple of (rows_done, total_rows).

        Raises:
            ValueError: If rows_per_batch is not positive.
        """
        if rows_per_batch is None:
            rows_per_batch = self._height
        if rows_per_batch <= 0:
            raise ValueError(f"rows_per_batch must be positive, got {rows_per_batch}")

        self._rows_done = 0
        for row_start in range(0, self._height, rows_per_batch):
            row_end = min(row_start + rows_per_batch, self._height)
            render_rows(row_start, row_end)
            self._rows_done = row_end
            yield (self._rows_done, self._height)

    def get_image_numpy(self) -> npt.NDArray[np.float64]:
        """Get the linear, unclamped image of shape (height, width, 3)."""
        return get_image_numpy()

    def get_display_image(self) -> npt.NDArray[np.float64]:
        """Get the tone mapped image with values in [0, 1]."""
        return process_image_for_display(self.get_image_numpy())

    def get_image_uint8(self) -> npt.NDArray[np.uint8]:
        """Get the tone mapped, 8-bit quantized image."""
        return image_to_uint8(self.get_image_numpy())

    def __repr__(self) -> str:
        """Return a string representation of the renderer state."""
        return (
            f"Renderer(width={self.width}, height={self.height}, "
            f"rows_done={self.rows_done})"
        )
