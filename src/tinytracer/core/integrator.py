"""Whitted-style recursive ray casting integrator.

This module implements the shading engine: for each primary ray it finds the
nearest surface, evaluates Phong direct lighting with hard shadows from every
point light, and follows mirror reflection and dielectric refraction rays up
to a fixed depth.

Color of one ray evaluation at depth d:

    if d > MAX_DEPTH or the ray misses:  BACKGROUND_COLOR
    else: diffuse_color * I_diffuse * albedo.x
        + white * I_specular * albedo.y
        + cast(reflected ray, d + 1) * albedo.z
        + cast(refracted ray, d + 1) * albedo.w

Taichi functions cannot call themselves, so the recursion is evaluated with a
small explicit stack. Every pending ray carries the product of the albedo
weights along its path; since the color is linear in the child colors, each
evaluation adds ``weight * local_color`` to the result. Rays whose weight is
exactly zero contribute nothing and are not traced. Colors are linear and
unclamped; the framebuffer stage tone maps them.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from tinytracer.core.integrator import setup_render_target, render_image
    >>> from tinytracer.scene.presets import create_classic_scene
    >>> from tinytracer.camera.pinhole import setup_camera
    >>>
    >>> scene, camera = create_classic_scene()
    >>> setup_camera(camera)
    >>> setup_render_target(1024, 768)
    >>> render_image()
"""

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from tinytracer.camera.pinhole import get_primary_ray
from tinytracer.core.ray import dot, magnitude, normalize, reflect, refract
from tinytracer.scene.intersection import intersect_scene
from tinytracer.scene.lights import get_light, num_lights

# Type alias for 3D vectors
vec3 = tm.vec3

# =============================================================================
# Rendering Constants
# =============================================================================

# Deepest recursion level that is still shaded (levels 0..MAX_DEPTH)
MAX_DEPTH = 4

# Offset applied to secondary ray origins to avoid self-intersection
RAY_EPSILON = 1e-3

# Color of rays that escape the scene or exceed MAX_DEPTH
BACKGROUND_COLOR = (0.2, 0.7, 0.8)

# Pending ray capacity. A depth-first walk of the binary reflection/refraction
# tree never holds more than MAX_DEPTH + 2 entries.
STACK_SIZE = 8

# =============================================================================
# Shading Core
# =============================================================================


@ti.func
def background_color() -> vec3:
    """The fixed background color as a vector."""
    return vec3(BACKGROUND_COLOR[0], BACKGROUND_COLOR[1], BACKGROUND_COLOR[2])


@ti.func
def offset_ray_origin(point: vec3, normal: vec3, direction: vec3) -> vec3:
    """Offset ray origin to avoid self-intersection.

    Pushes the point along the surface normal to the side the new ray
    travels toward: inside for rays going into the surface, outside
    otherwise.

    Args:
        point: The intersection point.
        normal: The outward surface normal.
        direction: The direction of the secondary ray.

    Returns:
        The offset origin point.
    """
    offset_dir = normal
    if dot(direction, normal) < 0.0:
        offset_dir = -normal
    return point + RAY_EPSILON * offset_dir


@ti.func
def direct_lighting(point: vec3, normal: vec3, view_direction: vec3, specular_exponent: ti.f64):
    """Accumulate diffuse and specular intensity from all point lights.

    A light is skipped when a shadow ray toward it hits a surface closer
    than the light itself.

    Args:
        point: The shaded surface point.
        normal: The outward surface normal at point.
        view_direction: Direction of the ray that reached point.
        specular_exponent: Phong exponent of the surface.

    Returns:
        A tuple (diffuse_intensity, specular_intensity).
    """
    diffuse_intensity = 0.0
    specular_intensity = 0.0

    for l in range(num_lights[None]):
        light = get_light(l)
        to_light = light.position - point
        light_direction = normalize(to_light)
        light_distance = magnitude(to_light)

        shadow_origin = offset_ray_origin(point, normal, light_direction)
        shadow_hit = intersect_scene(shadow_origin, light_direction)

        occluded = 0
        if shadow_hit.hit == 1:
            if magnitude(shadow_hit.point - shadow_origin) < light_distance:
                occluded = 1

        if occluded == 0:
            diffuse_intensity += light.intensity * tm.max(0.0, dot(light_direction, normal))
            specular_intensity += light.intensity * ti.pow(
                tm.max(0.0, dot(reflect(light_direction, normal), view_direction)),
                specular_exponent,
            )

    return diffuse_intensity, specular_intensity


@ti.func
def trace_ray(origin: vec3, direction: vec3, depth: ti.i32):
    """Evaluate the color seen along a ray.

    Args:
        origin: The ray origin.
        direction: The unit ray direction.
        depth: Recursion depth of this ray (0 for primary rays).

    Returns:
        A tuple (color, shaded) where color is the linear, unclamped color
        and shaded is the number of surface hits that were shaded.
    """
    color = vec3(0.0, 0.0, 0.0)
    shaded = 0

    stack_origins = ti.Matrix.zero(ti.f64, STACK_SIZE, 3)
    stack_directions = ti.Matrix.zero(ti.f64, STACK_SIZE, 3)
    stack_depths = ti.Vector.zero(ti.i32, STACK_SIZE)
    stack_weights = ti.Vector.zero(ti.f64, STACK_SIZE)

    for c in ti.static(range(3)):
        stack_origins[0, c] = origin[c]
        stack_directions[0, c] = direction[c]
    stack_depths[0] = depth
    stack_weights[0] = 1.0
    top = 1

    while top > 0:
        top -= 1
        ray_origin = vec3(stack_origins[top, 0], stack_origins[top, 1], stack_origins[top, 2])
        ray_direction = vec3(
            stack_directions[top, 0], stack_directions[top, 1], stack_directions[top, 2]
        )
        ray_depth = stack_depths[top]
        weight = stack_weights[top]

        if ray_depth > MAX_DEPTH:
            color += weight * background_color()
        else:
            rec = intersect_scene(ray_origin, ray_direction)
            if rec.hit == 0:
                color += weight * background_color()
            else:
                shaded += 1
                point = rec.point
                normal = rec.normal
                material = rec.material

                diffuse_intensity, specular_intensity = direct_lighting(
                    point, normal, ray_direction, material.specular_exponent
                )
                color += weight * (
                    material.diffuse_color * diffuse_intensity * material.albedo.x
                    + vec3(1.0, 1.0, 1.0) * (specular_intensity * material.albedo.y)
                )

                refract_weight = weight * material.albedo.w
                if refract_weight != 0.0 and top < STACK_SIZE:
                    refract_direction = normalize(
                        refract(ray_direction, normal, material.refractive_index, 1.0)
                    )
                    refract_origin = offset_ray_origin(point, normal, refract_direction)
                    for c in ti.static(range(3)):
                        stack_origins[top, c] = refract_origin[c]
                        stack_directions[top, c] = refract_direction[c]
                    stack_depths[top] = ray_depth + 1
                    stack_weights[top] = refract_weight
                    top += 1

                reflect_weight = weight * material.albedo.z
                if reflect_weight != 0.0 and top < STACK_SIZE:
                    reflect_direction = normalize(reflect(ray_direction, normal))
                    reflect_origin = offset_ray_origin(point, normal, reflect_direction)
                    for c in ti.static(range(3)):
                        stack_origins[top, c] = reflect_origin[c]
                        stack_directions[top, c] = reflect_direction[c]
                    stack_depths[top] = ray_depth + 1
                    stack_weights[top] = reflect_weight
                    top += 1

    return color, shaded


@ti.func
def cast_ray(origin: vec3, direction: vec3, depth: ti.i32) -> vec3:
    """Compute the linear color seen along a ray starting at a given depth."""
    color, _ = trace_ray(origin, direction, depth)
    return color


# =============================================================================
# Render Target (Framebuffer)
# =============================================================================

# Maximum supported image dimensions (preallocated to avoid kernel recompilation)
MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048

_image_width = ti.field(dtype=ti.i32, shape=())
_image_height = ti.field(dtype=ti.i32, shape=())

# Linear color per pixel, indexed [i, j] with j = 0 at the top row
_color_buffer = ti.Vector.field(3, dtype=ti.f64, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))

_render_target_initialized = ti.field(dtype=ti.i32, shape=())


def setup_render_target(width: int, height: int) -> None:
    """Initialize the render target buffer.

    Sets the active image dimensions and clears the buffer.

    Args:
        width: Image width in pixels (1..MAX_IMAGE_WIDTH).
        height: Image height in pixels (1..MAX_IMAGE_HEIGHT).

    Raises:
        ValueError: If dimensions are not positive or exceed the maximum.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
    if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({width}x{height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )

    _image_width[None] = width
    _image_height[None] = height
    _render_target_initialized[None] = 1

    clear_render_target()


def clear_render_target() -> None:
    """Clear the render target buffer to zero."""
    _color_buffer.fill(0.0)


def reset_render_target() -> None:
    """Forget the render target dimensions and clear the buffer."""
    _render_target_initialized[None] = 0
    _image_width[None] = 0
    _image_height[None] = 0
    clear_render_target()


def get_image_dimensions() -> tuple[int, int]:
    """Get the current render target dimensions as (width, height)."""
    return int(_image_width[None]), int(_image_height[None])


def _check_render_target_initialized() -> None:
    """Check if render target is initialized and raise if not."""
    if _render_target_initialized[None] == 0:
        raise RuntimeError("Render target not set up. Call setup_render_target() first.")


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def _render_rows(width: ti.i32, height: ti.i32, row_start: ti.i32, row_end: ti.i32):
    """Render one primary ray per pixel for rows [row_start, row_end).

    Every pixel is independent and writes only its own buffer cell, so the
    outer loop runs in parallel.
    """
    for i, j in ti.ndrange(width, (row_start, row_end)):
        ray = get_primary_ray(i, j, width, height)
        _color_buffer[i, j] = cast_ray(ray.origin, ray.direction, 0)


@ti.kernel
def _render_single_pixel(pixel_i: ti.i32, pixel_j: ti.i32, width: ti.i32, height: ti.i32) -> vec3:
    """Render the primary ray of one pixel without touching the buffer."""
    ray = get_primary_ray(pixel_i, pixel_j, width, height)
    return cast_ray(ray.origin, ray.direction, 0)


# =============================================================================
# Public Rendering API
# =============================================================================


def render_rows(row_start: int, row_end: int) -> None:
    """Render a band of rows into the color buffer.

    Args:
        row_start: First row to render (inclusive, 0 = top).
        row_end: Last row to render (exclusive). Clamped to the image height.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    row_start = max(0, row_start)
    row_end = min(height, row_end)
    if row_start < row_end:
        _render_rows(width, height, row_start, row_end)


def render_image() -> None:
    """Render every pixel of the render target.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    _, height = get_image_dimensions()
    render_rows(0, height)


def render_pixel(pixel_i: int, pixel_j: int) -> tuple[float, float, float]:
    """Compute the color of a single pixel.

    Args:
        pixel_i: Pixel column (0 = left).
        pixel_j: Pixel row (0 = top).

    Returns:
        Tuple of linear (R, G, B) values.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    color = _render_single_pixel(pixel_i, pixel_j, width, height)

    return (float(color[0]), float(color[1]), float(color[2]))


def get_image_numpy() -> npt.NDArray[np.float64]:
    """Get the rendered linear image as a NumPy array.

    Returns:
        Array of shape (height, width, 3), row 0 at the top, unclamped.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()

    full_image = _color_buffer.to_numpy()

    # Extract active region and transpose from (width, height, 3) to (height, width, 3)
    image = full_image[:width, :height, :]
    image = np.transpose(image, (1, 0, 2))

    return np.ascontiguousarray(image, dtype=np.float64)
