"""Tests for point light storage."""

import pytest
import taichi as ti


class TestLights:
    """Tests for light storage in Taichi fields."""

    def test_add_light(self):
        """Lights are stored in insertion order."""
        from tinytracer.scene.lights import add_light, get_light_count

        assert add_light((-20.0, 20.0, 20.0), 1.5) == 0
        assert add_light((30.0, 50.0, -25.0), 1.8) == 1
        assert get_light_count() == 2

    def test_get_light_in_kernel(self):
        """Device-side lookup returns position and intensity."""
        from tinytracer.scene.lights import add_light, get_light

        add_light((-20.0, 20.0, 20.0), 1.5)
        add_light((30.0, 20.0, 30.0), 1.7)

        position = ti.Vector.field(3, dtype=ti.f64, shape=())
        intensity = ti.field(dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            light = get_light(1)
            position[None] = light.position
            intensity[None] = light.intensity

        test_kernel()
        p = position[None]
        assert (p[0], p[1], p[2]) == pytest.approx((30.0, 20.0, 30.0))
        assert intensity[None] == pytest.approx(1.7)

    def test_clear_lights(self):
        """clear_lights removes every light."""
        from tinytracer.scene.lights import add_light, clear_lights, get_light_count

        add_light((0.0, 10.0, 0.0), 1.0)
        clear_lights()
        assert get_light_count() == 0

    def test_capacity_exceeded_raises(self):
        """Adding more than MAX_LIGHTS lights raises RuntimeError."""
        from tinytracer.scene.lights import MAX_LIGHTS, add_light

        for k in range(MAX_LIGHTS):
            add_light((float(k), 10.0, 0.0), 1.0)

        with pytest.raises(RuntimeError, match="Maximum number of lights"):
            add_light((0.0, 10.0, 0.0), 1.0)
