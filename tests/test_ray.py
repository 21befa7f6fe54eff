"""Unit tests for the Ray structure and vector algebra."""

import math

import taichi as ti


class TestRay:
    """Tests for the Ray dataclass and ray evaluation."""

    def test_ray_at(self):
        """Test evaluating a point along a ray."""
        from skytracer.core.ray import Ray, ray_at, vec3

        result = ti.Vector.field(3, dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            ray = Ray(origin=vec3(1.0, 2.0, 3.0), direction=vec3(0.0, 0.0, -2.0))
            result[None] = ray_at(ray, 2.5)

        test_kernel()
        p = result[None]
        assert abs(p[0] - 1.0) < 1e-6
        assert abs(p[1] - 2.0) < 1e-6
        assert abs(p[2] - (-2.0)) < 1e-6

    def test_make_ray_keeps_direction_unnormalized(self):
        """Test that make_ray stores the direction as given."""
        from skytracer.core.ray import make_ray, vec3

        result = ti.Vector.field(3, dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            ray = make_ray(vec3(0.0, 0.0, 0.0), vec3(3.0, 4.0, 0.0))
            result[None] = ray.direction

        test_kernel()
        d = result[None]
        assert abs(d[0] - 3.0) < 1e-6
        assert abs(d[1] - 4.0) < 1e-6


class TestVectorAlgebra:
    """Tests for dot, cross, length and normalize."""

    def test_dot_and_cross(self):
        """Test dot and cross products of basis vectors."""
        from skytracer.core.ray import cross, dot, vec3

        dot_result = ti.field(dtype=ti.f32, shape=())
        cross_result = ti.Vector.field(3, dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            dot_result[None] = dot(vec3(1.0, 2.0, 3.0), vec3(4.0, -5.0, 6.0))
            cross_result[None] = cross(vec3(1.0, 0.0, 0.0), vec3(0.0, 1.0, 0.0))

        test_kernel()
        assert abs(dot_result[None] - 12.0) < 1e-6
        c = cross_result[None]
        assert abs(c[0]) < 1e-6
        assert abs(c[1]) < 1e-6
        assert abs(c[2] - 1.0) < 1e-6

    def test_length(self):
        """Test the Euclidean norm of a 3-4-0 vector."""
        from skytracer.core.ray import length, length_squared, vec3

        len_result = ti.field(dtype=ti.f32, shape=())
        len_sq_result = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            len_result[None] = length(vec3(3.0, 4.0, 0.0))
            len_sq_result[None] = length_squared(vec3(3.0, 4.0, 0.0))

        test_kernel()
        assert abs(len_result[None] - 5.0) < 1e-6
        assert abs(len_sq_result[None] - 25.0) < 1e-6

    def test_normalize_has_unit_length(self):
        """Test that normalize returns a unit vector for various inputs."""
        from skytracer.core.ray import length, normalize, vec3

        inputs = [(3.0, 4.0, 0.0), (-1.0, 2.0, -2.0), (1e-3, 0.0, 0.0), (100.0, 200.0, 300.0)]
        n = len(inputs)
        vectors = ti.Vector.field(3, dtype=ti.f32, shape=n)
        lengths = ti.field(dtype=ti.f32, shape=n)
        for i, v in enumerate(inputs):
            vectors[i] = v

        @ti.kernel
        def test_kernel():
            for i in range(n):
                lengths[i] = length(normalize(vectors[i]))

        test_kernel()
        for i in range(n):
            assert abs(lengths[i] - 1.0) < 1e-5

    def test_near_zero(self):
        """Test the near-zero check."""
        from skytracer.core.ray import near_zero, vec3

        results = ti.field(dtype=ti.i32, shape=2)

        @ti.kernel
        def test_kernel():
            results[0] = near_zero(vec3(1e-9, -1e-9, 0.0))
            results[1] = near_zero(vec3(1e-9, 1e-3, 0.0))

        test_kernel()
        assert results[0] == 1
        assert results[1] == 0


class TestReflect:
    """Tests for reflection about a normal."""

    def test_reflect_45_degrees(self):
        """Test reflecting a diagonal ray off a horizontal surface."""
        from skytracer.core.ray import reflect, vec3

        result = ti.Vector.field(3, dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = reflect(vec3(1.0, -1.0, 0.0), vec3(0.0, 1.0, 0.0))

        test_kernel()
        r = result[None]
        assert abs(r[0] - 1.0) < 1e-6
        assert abs(r[1] - 1.0) < 1e-6
        assert abs(r[2]) < 1e-6

    def test_reflect_preserves_angle_with_normal(self):
        """Test that the reflected ray makes the mirrored angle with the normal."""
        from skytracer.core.ray import normalize, reflect, vec3

        dots = ti.field(dtype=ti.f32, shape=2)

        @ti.kernel
        def test_kernel():
            n = normalize(vec3(0.3, 1.0, -0.2))
            d = normalize(vec3(0.7, -0.4, 0.5))
            r = reflect(d, n)
            dots[0] = ti.math.dot(d, n)
            dots[1] = ti.math.dot(r, n)

        test_kernel()
        assert abs(dots[0] + dots[1]) < 1e-5

    def test_reflect_preserves_length(self):
        """Test that reflecting a unit vector about a unit normal keeps unit length."""
        from skytracer.core.ray import length, normalize, reflect, vec3

        result = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            n = normalize(vec3(1.0, 1.0, 1.0))
            result[None] = length(reflect(normalize(vec3(-2.0, 0.5, 1.0)), n))

        test_kernel()
        assert abs(result[None] - 1.0) < 1e-5
        assert not math.isnan(result[None])
