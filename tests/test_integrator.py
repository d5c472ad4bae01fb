"""Tests for the Whitted shading integrator.

This module tests the core shading functionality including:
- Background color for misses
- Recursion depth cap
- Hard shadows and Phong terms in direct lighting
- Refraction through a glass sphere
- Render target setup and management

Note: Imports are done inside test methods to avoid Taichi initialization issues.
The conftest.py fixture initializes Taichi before tests run, so module-level
imports of modules containing ti.field() declarations would fail.
"""

import numpy as np
import pytest
import taichi as ti

BACKGROUND = (0.2, 0.7, 0.8)


def _trace(origin, direction, depth=0):
    """Run trace_ray in a kernel and return (color, shaded)."""
    from tinytracer.core.integrator import trace_ray
    from tinytracer.core.ray import normalize, vec3

    color = ti.Vector.field(3, dtype=ti.f64, shape=())
    shaded = ti.field(dtype=ti.i32, shape=())

    @ti.kernel
    def test_kernel(
        ox: ti.f64, oy: ti.f64, oz: ti.f64,
        dx: ti.f64, dy: ti.f64, dz: ti.f64,
        start_depth: ti.i32,
    ):
        c, n = trace_ray(vec3(ox, oy, oz), normalize(vec3(dx, dy, dz)), start_depth)
        color[None] = c
        shaded[None] = n

    test_kernel(*origin, *direction, depth)
    c = color[None]
    return (c[0], c[1], c[2]), shaded[None]


def _direct_lighting(point, normal, view_direction, specular_exponent):
    """Run direct_lighting in a kernel and return (diffuse, specular)."""
    from tinytracer.core.integrator import direct_lighting
    from tinytracer.core.ray import vec3

    diffuse = ti.field(dtype=ti.f64, shape=())
    specular = ti.field(dtype=ti.f64, shape=())

    @ti.kernel
    def test_kernel(
        px: ti.f64, py: ti.f64, pz: ti.f64,
        nx: ti.f64, ny: ti.f64, nz: ti.f64,
        vx: ti.f64, vy: ti.f64, vz: ti.f64,
        exponent: ti.f64,
    ):
        d, s = direct_lighting(vec3(px, py, pz), vec3(nx, ny, nz), vec3(vx, vy, vz), exponent)
        diffuse[None] = d
        specular[None] = s

    test_kernel(*point, *normal, *view_direction, specular_exponent)
    return diffuse[None], specular[None]


class TestConstants:
    """Test the fixed rendering constants."""

    def test_constants(self):
        """Depth cap, bias and background are fixed."""
        from tinytracer.core.integrator import BACKGROUND_COLOR, MAX_DEPTH, RAY_EPSILON

        assert MAX_DEPTH == 4
        assert RAY_EPSILON == 1e-3
        assert BACKGROUND_COLOR == BACKGROUND


class TestOffsetRayOrigin:
    """Test the secondary ray bias."""

    def test_offset_follows_ray_side(self):
        """Outgoing rays are pushed outside, incoming rays inside."""
        from tinytracer.core.integrator import offset_ray_origin
        from tinytracer.core.ray import vec3

        outside = ti.Vector.field(3, dtype=ti.f64, shape=())
        inside = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            p = vec3(0.0, 0.0, -14.0)
            n = vec3(0.0, 0.0, 1.0)
            outside[None] = offset_ray_origin(p, n, vec3(0.0, 1.0, 0.0))
            inside[None] = offset_ray_origin(p, n, vec3(0.0, 0.0, -1.0))

        test_kernel()
        assert outside[None][2] == pytest.approx(-14.0 + 1e-3)
        assert inside[None][2] == pytest.approx(-14.0 - 1e-3)


class TestTraceRay:
    """Test ray evaluation."""

    def test_miss_returns_background(self):
        """A ray that hits nothing returns the background color exactly."""
        color, shaded = _trace((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert color == BACKGROUND
        assert shaded == 0

    def test_depth_beyond_cap_returns_background(self):
        """Starting past the depth cap returns the background without shading."""
        from tinytracer.materials.material import add_material
        from tinytracer.scene.intersection import add_sphere

        mat = add_material((1.0, 1.0, 1.0), (1.0, 0.0, 0.0, 0.0), 10.0)
        add_sphere((0.0, 0.0, -16.0), 2.0, mat)

        color, shaded = _trace((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), depth=5)
        assert color == pytest.approx(BACKGROUND)
        assert shaded == 0

    def test_mirror_enclosure_stops_at_depth_cap(self):
        """Inside a mirror sphere the ray is shaded at depths 0 through 4 only."""
        from tinytracer.materials.material import add_material
        from tinytracer.scene.intersection import add_sphere

        mirror = add_material((1.0, 1.0, 1.0), (0.0, 0.0, 0.5, 0.0), 10.0)
        add_sphere((0.0, 0.0, 0.0), 5.0, mirror)

        color, shaded = _trace((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert shaded == 5
        expected = tuple(c * 0.5**5 for c in BACKGROUND)
        assert color == pytest.approx(expected, abs=1e-12)

    def test_mirror_enclosure_from_later_depth(self):
        """Starting at depth 3 leaves two shaded levels."""
        from tinytracer.materials.material import add_material
        from tinytracer.scene.intersection import add_sphere

        mirror = add_material((1.0, 1.0, 1.0), (0.0, 0.0, 0.5, 0.0), 10.0)
        add_sphere((0.0, 0.0, 0.0), 5.0, mirror)

        color, shaded = _trace((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), depth=3)
        assert shaded == 2
        expected = tuple(c * 0.5**2 for c in BACKGROUND)
        assert color == pytest.approx(expected, abs=1e-12)

    def test_matte_sphere_without_lights_is_black(self):
        """With no lights and no reflection a hit contributes nothing."""
        from tinytracer.materials.material import add_material
        from tinytracer.scene.intersection import add_sphere

        mat = add_material((0.3, 0.1, 0.1), (0.9, 0.1, 0.0, 0.0), 10.0)
        add_sphere((0.0, 0.0, -16.0), 2.0, mat)

        color, shaded = _trace((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert shaded == 1
        assert color == (0.0, 0.0, 0.0)

    def test_lit_matte_sphere_head_on(self):
        """A light behind the camera lights the facing point at full cosine."""
        from tinytracer.materials.material import add_material
        from tinytracer.scene.intersection import add_sphere
        from tinytracer.scene.lights import add_light

        mat = add_material((0.3, 0.1, 0.1), (0.9, 0.0, 0.0, 0.0), 10.0)
        add_sphere((0.0, 0.0, -16.0), 2.0, mat)
        add_light((0.0, 0.0, 10.0), 1.5)

        color, _ = _trace((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert color == pytest.approx((0.3 * 1.5 * 0.9, 0.1 * 1.5 * 0.9, 0.1 * 1.5 * 0.9))

    def test_refraction_along_axis_passes_through(self):
        """A purely refractive sphere hit dead center shows the background."""
        from tinytracer.materials.material import add_material
        from tinytracer.scene.intersection import add_sphere

        glass = add_material((0.6, 0.7, 0.8), (0.0, 0.0, 0.0, 1.0), 125.0, 1.5)
        add_sphere((0.0, 0.0, -16.0), 2.0, glass)

        color, shaded = _trace((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        # Entry and exit surfaces
        assert shaded == 2
        assert color == pytest.approx(BACKGROUND, abs=1e-12)

    def test_refraction_along_axis_exits_on_axis(self):
        """The ray refracted twice through the glass sphere leaves along the axis."""
        from tinytracer.core.integrator import offset_ray_origin
        from tinytracer.core.ray import normalize, refract, vec3
        from tinytracer.geometry.sphere import hit_sphere, make_sphere

        exit_point = ti.Vector.field(3, dtype=ti.f64, shape=())
        exit_dir = ti.Vector.field(3, dtype=ti.f64, shape=())
        hits = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            sphere = make_sphere(vec3(0.0, 0.0, -16.0), 2.0)
            d = vec3(0.0, 0.0, -1.0)
            entry = hit_sphere(vec3(0.0, 0.0, 0.0), d, sphere)
            inner = normalize(refract(d, entry.normal, 1.5, 1.0))
            far = hit_sphere(offset_ray_origin(entry.point, entry.normal, inner), inner, sphere)
            hits[None] = entry.hit + far.hit
            exit_point[None] = far.point
            exit_dir[None] = normalize(refract(inner, far.normal, 1.5, 1.0))

        test_kernel()

        assert hits[None] == 2
        p = exit_point[None]
        assert abs(p[0]) < 1e-3
        assert abs(p[1]) < 1e-3
        assert p[2] == pytest.approx(-18.0, abs=1e-9)
        d = exit_dir[None]
        assert (d[0], d[1], d[2]) == pytest.approx((0.0, 0.0, -1.0), abs=1e-9)

    def test_refraction_is_symmetric(self):
        """Mirrored rays through a glass sphere give the same color."""
        from tinytracer.materials.material import add_material
        from tinytracer.scene.intersection import add_sphere

        glass = add_material((0.6, 0.7, 0.8), (0.0, 0.5, 0.1, 0.8), 125.0, 1.5)
        add_sphere((0.0, 0.0, -16.0), 2.0, glass)

        left, _ = _trace((0.0, 0.0, 0.0), (-0.05, 0.0, -1.0))
        right, _ = _trace((0.0, 0.0, 0.0), (0.05, 0.0, -1.0))
        assert left == pytest.approx(right, abs=1e-9)
        assert all(np.isfinite(left))

    def test_cast_ray_matches_trace_ray(self):
        """cast_ray returns the color part of trace_ray."""
        from tinytracer.core.integrator import cast_ray
        from tinytracer.core.ray import vec3
        from tinytracer.scene.presets import create_classic_scene

        create_classic_scene()

        result = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = cast_ray(vec3(0.0, 0.0, 0.0), vec3(0.0, 0.0, -1.0), 0)

        test_kernel()
        expected, _ = _trace((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert tuple(result[None][k] for k in range(3)) == pytest.approx(expected)


class TestDirectLighting:
    """Test Phong direct lighting with shadows."""

    def test_unoccluded_light(self):
        """A light straight above gives full diffuse and specular."""
        from tinytracer.scene.lights import add_light

        add_light((0.0, 10.0, 0.0), 1.5)
        diffuse, specular = _direct_lighting(
            (0.0, 0.0, 0.0), (0.0, 1.0, 0.0), (0.0, -1.0, 0.0), 50.0
        )
        assert diffuse == pytest.approx(1.5)
        assert specular == pytest.approx(1.5)

    def test_occluder_casts_shadow(self):
        """A sphere between the point and the light blocks it."""
        from tinytracer.materials.material import add_material
        from tinytracer.scene.intersection import add_sphere
        from tinytracer.scene.lights import add_light

        mat = add_material((1.0, 1.0, 1.0), (1.0, 0.0, 0.0, 0.0), 10.0)
        add_sphere((0.0, 5.0, 0.0), 1.0, mat)
        add_light((0.0, 10.0, 0.0), 1.5)

        diffuse, specular = _direct_lighting(
            (0.0, 0.0, 0.0), (0.0, 1.0, 0.0), (0.0, -1.0, 0.0), 50.0
        )
        assert diffuse == 0.0
        assert specular == 0.0

    def test_object_beyond_light_does_not_shadow(self):
        """A sphere farther away than the light does not block it."""
        from tinytracer.materials.material import add_material
        from tinytracer.scene.intersection import add_sphere
        from tinytracer.scene.lights import add_light

        mat = add_material((1.0, 1.0, 1.0), (1.0, 0.0, 0.0, 0.0), 10.0)
        add_sphere((0.0, 20.0, 0.0), 1.0, mat)
        add_light((0.0, 10.0, 0.0), 1.5)

        diffuse, _ = _direct_lighting(
            (0.0, 0.0, 0.0), (0.0, 1.0, 0.0), (0.0, -1.0, 0.0), 50.0
        )
        assert diffuse == pytest.approx(1.5)

    def test_lambert_cosine_and_light_sum(self):
        """Diffuse intensity sums I * cos(theta) over lights."""
        from tinytracer.scene.lights import add_light

        add_light((10.0, 10.0, 0.0), 1.0)
        add_light((0.0, 10.0, 0.0), 2.0)
        # Light below the surface contributes nothing
        add_light((0.0, -10.0, 0.0), 5.0)

        diffuse, _ = _direct_lighting(
            (0.0, 0.0, 0.0), (0.0, 1.0, 0.0), (0.0, -1.0, 0.0), 50.0
        )
        assert diffuse == pytest.approx(2.0 + np.sqrt(0.5))

    def test_specular_falls_off_with_exponent(self):
        """Specular uses max(0, dot(reflect(L, N), D))^exponent."""
        from tinytracer.scene.lights import add_light

        add_light((10.0, 10.0, 0.0), 1.0)
        view = (-np.sqrt(0.5), -np.sqrt(0.5), 0.0)
        # reflect(L, N) for L = (s, s, 0) is (s, -s, 0); dot with view = 0
        _, specular = _direct_lighting((0.0, 0.0, 0.0), (0.0, 1.0, 0.0), view, 10.0)
        assert specular == pytest.approx(0.0, abs=1e-12)

        view = (np.sqrt(0.5), -np.sqrt(0.5), 0.0)
        _, specular = _direct_lighting((0.0, 0.0, 0.0), (0.0, 1.0, 0.0), view, 10.0)
        assert specular == pytest.approx(1.0)


class TestRenderTarget:
    """Test render target initialization and management."""

    def test_setup_render_target(self):
        """Dimensions are recorded and the buffer is cleared."""
        from tinytracer.core.integrator import (
            get_image_dimensions,
            get_image_numpy,
            setup_render_target,
        )

        setup_render_target(64, 48)
        assert get_image_dimensions() == (64, 48)

        image = get_image_numpy()
        assert image.shape == (48, 64, 3)
        assert image.dtype == np.float64
        assert np.all(image == 0.0)

    @pytest.mark.parametrize("width,height", [(0, 10), (10, 0), (-1, 5), (4096, 10), (10, 4096)])
    def test_invalid_dimensions_raise(self, width, height):
        """Non-positive or oversized dimensions raise ValueError."""
        from tinytracer.core.integrator import setup_render_target

        with pytest.raises(ValueError):
            setup_render_target(width, height)

    def test_uninitialized_render_target_raises(self):
        """Rendering or reading before setup raises RuntimeError."""
        from tinytracer.core.integrator import get_image_numpy, render_image, render_pixel

        with pytest.raises(RuntimeError, match="Render target not set up"):
            render_image()
        with pytest.raises(RuntimeError, match="Render target not set up"):
            render_pixel(0, 0)
        with pytest.raises(RuntimeError, match="Render target not set up"):
            get_image_numpy()

    def test_render_empty_scene_is_background(self):
        """Every pixel of an empty scene is the background color."""
        from tinytracer.camera.pinhole import PinholeCamera, setup_camera
        from tinytracer.core.integrator import get_image_numpy, render_image, setup_render_target

        setup_camera(PinholeCamera())
        setup_render_target(32, 24)
        render_image()

        image = get_image_numpy()
        assert np.allclose(image, np.array(BACKGROUND))

    def test_render_rows_only_touches_band(self):
        """render_rows fills only the requested rows."""
        from tinytracer.camera.pinhole import PinholeCamera, setup_camera
        from tinytracer.core.integrator import get_image_numpy, render_rows, setup_render_target

        setup_camera(PinholeCamera())
        setup_render_target(16, 16)
        render_rows(4, 8)

        image = get_image_numpy()
        assert np.allclose(image[4:8], np.array(BACKGROUND))
        assert np.all(image[:4] == 0.0)
        assert np.all(image[8:] == 0.0)

    def test_render_pixel_matches_image(self):
        """render_pixel computes the same color as the full render."""
        from tinytracer.camera.pinhole import setup_camera
        from tinytracer.core.integrator import (
            get_image_numpy,
            render_image,
            render_pixel,
            setup_render_target,
        )
        from tinytracer.scene.presets import create_classic_scene

        _, camera = create_classic_scene()
        setup_camera(camera)
        setup_render_target(64, 48)
        render_image()

        image = get_image_numpy()
        for i, j in [(0, 0), (20, 30), (63, 47), (32, 24)]:
            assert render_pixel(i, j) == pytest.approx(tuple(image[j, i]))
