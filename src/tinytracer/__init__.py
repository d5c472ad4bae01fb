"""Taichi-based Whitted-style ray tracer.

This package renders small sphere scenes lit by point lights, with support for:
- Phong shading (diffuse and specular) with hard shadows
- Mirror reflection and dielectric refraction up to a fixed depth
- An optional checkerboard floor patch
- One primary ray per pixel, evaluated in parallel

Subpackages:
    core: Ray and vector utilities, the shading integrator and the renderer
    geometry: Sphere and floor intersection
    materials: Phong materials and presets
    scene: Scene storage, intersection resolver, lights and scene presets
    camera: Pinhole camera for primary rays
    preview: Framebuffer tone mapping, preview and PNG export
"""

__version__ = "0.1.0"
