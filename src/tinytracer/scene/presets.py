"""Built-in scenes.

Every factory clears the current scene, builds a new one and returns it with
the camera to render it from. All scenes use the default camera: at the
origin, looking down -z, 60 degree vertical field of view.

Scenes:
    classic: ivory, glass, red rubber and mirror spheres above the
        checkerboard floor, lit by three lights.
    matte:   the same layout without dielectrics, mirrors or floor
        (ivory and red rubber only), lit by one light.
    single:  one ivory sphere and one light.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from tinytracer.scene.presets import create_scene
    >>> from tinytracer.camera.pinhole import setup_camera
    >>>
    >>> scene, camera = create_scene("classic")
    >>> setup_camera(camera)
"""

from collections.abc import Callable

from tinytracer.camera.pinhole import PinholeCamera
from tinytracer.scene.manager import SceneManager

DEFAULT_VFOV = 60.0


def create_classic_scene(vfov: float = DEFAULT_VFOV) -> tuple[SceneManager, PinholeCamera]:
    """Create the four-sphere scene with the checkerboard floor."""
    scene = SceneManager()

    ivory = scene.add_preset_material("ivory")
    glass = scene.add_preset_material("glass")
    red_rubber = scene.add_preset_material("red_rubber")
    mirror = scene.add_preset_material("mirror")

    scene.add_sphere((-3.0, 0.0, -16.0), 2.0, ivory)
    scene.add_sphere((-1.0, -1.5, -12.0), 2.0, glass)
    scene.add_sphere((1.5, -0.5, -18.0), 3.0, red_rubber)
    scene.add_sphere((7.0, 5.0, -18.0), 4.0, mirror)

    scene.add_light((-20.0, 20.0, 20.0), 1.5)
    scene.add_light((30.0, 50.0, -25.0), 1.8)
    scene.add_light((30.0, 20.0, 30.0), 1.7)

    scene.set_checkerboard(True)

    return scene, PinholeCamera(vfov=vfov)


def create_matte_scene(vfov: float = DEFAULT_VFOV) -> tuple[SceneManager, PinholeCamera]:
    """Create the four-sphere scene without refraction or mirrors."""
    scene = SceneManager()

    ivory = scene.add_preset_material("ivory")
    red_rubber = scene.add_preset_material("red_rubber")

    scene.add_sphere((-3.0, 0.0, -16.0), 2.0, ivory)
    scene.add_sphere((-1.0, -1.5, -12.0), 2.0, red_rubber)
    scene.add_sphere((1.5, -0.5, -18.0), 3.0, red_rubber)
    scene.add_sphere((7.0, 5.0, -18.0), 4.0, ivory)

    scene.add_light((-20.0, 20.0, 20.0), 1.5)

    return scene, PinholeCamera(vfov=vfov)


def create_single_sphere_scene(vfov: float = DEFAULT_VFOV) -> tuple[SceneManager, PinholeCamera]:
    """Create a scene with one ivory sphere and one light."""
    scene = SceneManager()

    ivory = scene.add_preset_material("ivory")
    scene.add_sphere((-3.0, 0.0, -16.0), 2.0, ivory)
    scene.add_light((-20.0, 20.0, 20.0), 1.5)

    return scene, PinholeCamera(vfov=vfov)


SCENES: dict[str, Callable[[float], tuple[SceneManager, PinholeCamera]]] = {
    "classic": create_classic_scene,
    "matte": create_matte_scene,
    "single": create_single_sphere_scene,
}


def create_scene(name: str, vfov: float = DEFAULT_VFOV) -> tuple[SceneManager, PinholeCamera]:
    """Build a named scene.

    Args:
        name: One of the keys of SCENES.
        vfov: Vertical field of view of the returned camera, in degrees.

    Returns:
        Tuple of (scene, camera).

    Raises:
        ValueError: If the scene name is unknown.
    """
    if name not in SCENES:
        raise ValueError(f"Unknown scene: {name!r} (expected one of {sorted(SCENES)})")
    return SCENES[name](vfov)
