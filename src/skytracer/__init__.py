"""Taichi-based stochastic ray tracer for sphere scenes under a sky gradient.

Subpackages:
    core: Vector helpers, random streams, color encoding, the sampling
        integrator and the renderer
    geometry: Sphere primitive and ray-sphere intersection
    materials: Matte (diffuse) and metal (specular) scattering
    scene: Sphere storage, the World builder and preset scenes
    camera: Pinhole camera with ray generation
    output: PPM image export
"""

__version__ = "0.1.0"
