"""Geometry module: the sphere primitive.

Ray-sphere intersection is a Taichi function returning a HitRecord with an
outward unit normal:
    rec = hit_sphere(ray_origin, ray_direction, sphere, t_min, t_max)
"""

from .sphere import HitRecord, Sphere, hit_sphere, make_sphere

__all__ = [
    "Sphere",
    "HitRecord",
    "hit_sphere",
    "make_sphere",
]
