"""Sphere primitive with robust ray-sphere intersection.

This module provides a Sphere dataclass, the HitRecord produced by a
successful intersection, and the intersection routine itself.

The ray R(t) = O + tD meets the sphere (C, r) where |R(t) - C|^2 = r^2, a
quadratic in t. The roots are computed with the cancellation-free form of the
quadratic formula so that grazing rays and large spheres (such as a ground
plane approximated by a sphere of radius 100) stay stable.

Acceptance uses the closed interval [t_min, t_max] on both roots; the
smaller accepted root wins.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from skytracer.geometry.sphere import Sphere, hit_sphere
    >>> sphere = Sphere(center=ti.math.vec3(0, 0, -1), radius=0.5)
    >>> # Use hit_sphere within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Squared direction lengths below this are treated as degenerate rays
DEGENERATE_DIRECTION_EPSILON = 1e-12


@ti.dataclass
class Sphere:
    """A sphere defined by center point and radius.

    Attributes:
        center: The center point of the sphere (vec3).
        radius: The radius of the sphere (positive float).
    """

    center: vec3
    radius: ti.f32


@ti.dataclass
class HitRecord:
    """Record of a ray-sphere intersection.

    Attributes:
        hit: Whether the ray intersected the sphere (1 if hit, 0 if miss).
        t: The ray parameter of the intersection. Only valid if hit == 1.
        point: The intersection point. Only valid if hit == 1.
        normal: The unit surface normal at the intersection point. Always
            points outward from the sphere center, whichever side the ray
            came from. Only valid if hit == 1.
    """

    hit: ti.i32
    t: ti.f32
    point: vec3
    normal: vec3


@ti.func
def _solve_quadratic_robust(h: ti.f32, a: ti.f32, c: ti.f32, sqrt_d: ti.f32):
    """Solve a*t^2 + 2*h*t + c = 0 without catastrophic cancellation.

    Args:
        h: Half of the linear coefficient.
        a: Quadratic coefficient.
        c: Constant term.
        sqrt_d: Square root of the discriminant (h^2 - a*c).

    Returns:
        Tuple of (t0, t1) where t0 <= t1.
    """
    # q = -(h + sign(h) * sqrt(discriminant))
    sign_h = ti.select(h < 0.0, -1.0, 1.0)
    q = -(h + sign_h * sqrt_d)

    t0 = 0.0
    t1 = 0.0

    if ti.abs(q) < 1e-10:
        # q vanishes only when h and the discriminant both do; c / q is undefined
        t0 = (-h - sqrt_d) / a
        t1 = (-h + sqrt_d) / a
    else:
        t0 = q / a
        t1 = c / q

    if t0 > t1:
        temp = t0
        t0 = t1
        t1 = temp

    return t0, t1


@ti.func
def hit_sphere(
    ray_origin: vec3,
    ray_direction: vec3,
    sphere: Sphere,
    t_min: ti.f32,
    t_max: ti.f32,
) -> HitRecord:
    """Test for ray-sphere intersection.

    With oc = origin - center the quadratic coefficients are:
        a = dot(direction, direction)
        h = dot(oc, direction)        (half of the usual b)
        c = dot(oc, oc) - radius^2
        discriminant = h^2 - a*c

    A negative discriminant means no hit. Otherwise the smaller root inside
    [t_min, t_max] is used, falling back to the larger one.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray (need not be unit
            length, but must not be zero; a zero direction reports a miss).
        sphere: The sphere to test intersection against.
        t_min: Smallest accepted ray parameter (inclusive).
        t_max: Largest accepted ray parameter (inclusive).

    Returns:
        A HitRecord. Check the hit field to determine if intersection occurred.
    """
    oc = ray_origin - sphere.center

    a = tm.dot(ray_direction, ray_direction)
    h = tm.dot(oc, ray_direction)
    c = tm.dot(oc, oc) - sphere.radius * sphere.radius

    discriminant = h * h - a * c

    # Initialize result fields (Taichi requires outer-scope declaration)
    did_hit = 0
    hit_t = 0.0
    hit_point = vec3(0.0, 0.0, 0.0)
    hit_normal = vec3(0.0, 0.0, 0.0)

    if a > DEGENERATE_DIRECTION_EPSILON and discriminant >= 0.0:
        sqrt_d = ti.sqrt(discriminant)
        t0, t1 = _solve_quadratic_robust(h, a, c, sqrt_d)

        t = t0
        valid = (t >= t_min) and (t <= t_max)

        if not valid:
            t = t1
            valid = (t >= t_min) and (t <= t_max)

        if valid:
            did_hit = 1
            hit_t = t
            hit_point = ray_origin + t * ray_direction
            hit_normal = (hit_point - sphere.center) * (1.0 / sphere.radius)

    return HitRecord(
        hit=did_hit,
        t=hit_t,
        point=hit_point,
        normal=hit_normal,
    )


@ti.func
def make_sphere(center: vec3, radius: ti.f32) -> Sphere:
    """Create a sphere from center and radius inside a Taichi scope."""
    return Sphere(center=center, radius=radius)
