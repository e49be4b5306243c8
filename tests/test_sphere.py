"""Unit tests for sphere intersection.

Tests cover:
- Ray hitting sphere from outside (front face)
- Ray missing sphere (record untouched)
- Ray starting inside sphere (back face, outward normal)
- Ray tangent to sphere
- Open (t_min, t_max) interval
- Hit points on the surface with unit normals
"""

import math

import pytest


def _matte():
    from pathtracer.core.color import Color
    from pathtracer.materials import Lambertian

    return Lambertian(Color(0.5, 0.5, 0.5))


class TestSphereBasics:
    """Tests for Sphere construction."""

    def test_create_sphere(self):
        from pathtracer.core.vec3 import Vec3
        from pathtracer.geometry import Sphere

        material = _matte()
        sphere = Sphere(Vec3(1.0, 2.0, 3.0), 0.5, material)
        assert sphere.center == Vec3(1.0, 2.0, 3.0)
        assert sphere.radius == 0.5
        assert sphere.material is material

    @pytest.mark.parametrize("radius", [0.0, -1.0])
    def test_non_positive_radius_rejected(self, radius):
        from pathtracer.core.vec3 import Vec3
        from pathtracer.geometry import Sphere

        with pytest.raises(ValueError, match="radius must be positive"):
            Sphere(Vec3.zero(), radius, _matte())


class TestSphereIntersection:
    """Tests for ray-sphere intersection."""

    def test_direct_hit(self):
        """Test ray hitting sphere head-on from outside."""
        from pathtracer.core.ray import Ray
        from pathtracer.core.vec3 import Vec3
        from pathtracer.geometry import HitRecord, Sphere

        material = _matte()
        sphere = Sphere(Vec3(0.0, 0.0, -1.0), 0.5, material)
        rec = HitRecord()

        assert sphere.hit(Ray(Vec3.zero(), Vec3(0.0, 0.0, -1.0)), 0.001, math.inf, rec)
        assert rec.t == pytest.approx(0.5)
        assert rec.point.z == pytest.approx(-0.5)
        assert rec.normal.z == pytest.approx(1.0)
        assert rec.front_face is True
        assert rec.material is material

    def test_miss_leaves_record_untouched(self):
        from pathtracer.core.ray import Ray
        from pathtracer.core.vec3 import Vec3
        from pathtracer.geometry import HitRecord, Sphere

        sphere = Sphere(Vec3(0.0, 0.0, -1.0), 0.5, _matte())
        rec = HitRecord(t=123.0)

        assert not sphere.hit(Ray(Vec3.zero(), Vec3(0.0, 1.0, 0.0)), 0.001, math.inf, rec)
        assert rec.t == 123.0
        assert rec.material is None

    def test_ray_from_inside(self):
        """Origin inside: the far root is used and the normal stays outward."""
        from pathtracer.core.ray import Ray
        from pathtracer.core.vec3 import Vec3
        from pathtracer.geometry import HitRecord, Sphere

        sphere = Sphere(Vec3(0.0, 0.0, -1.0), 0.5, _matte())
        rec = HitRecord()

        ray = Ray(Vec3(0.0, 0.0, -1.0), Vec3(0.0, 0.0, -1.0))
        assert sphere.hit(ray, 0.001, math.inf, rec)
        assert rec.t == pytest.approx(0.5)
        assert rec.point.z == pytest.approx(-1.5)
        assert rec.normal.z == pytest.approx(-1.0)
        assert rec.front_face is False

    def test_tangent_ray(self):
        from pathtracer.core.ray import Ray
        from pathtracer.core.vec3 import Vec3
        from pathtracer.geometry import HitRecord, Sphere

        sphere = Sphere(Vec3(0.0, 0.0, -1.0), 0.5, _matte())
        rec = HitRecord()

        ray = Ray(Vec3(0.0, 0.5, 0.0), Vec3(0.0, 0.0, -1.0))
        assert sphere.hit(ray, 0.001, math.inf, rec)
        assert rec.t == pytest.approx(1.0)
        assert rec.normal.y == pytest.approx(1.0)

    def test_near_root_preferred(self):
        from pathtracer.core.ray import Ray
        from pathtracer.core.vec3 import Vec3
        from pathtracer.geometry import HitRecord, Sphere

        sphere = Sphere(Vec3(0.0, 0.0, -3.0), 1.0, _matte())
        rec = HitRecord()

        assert sphere.hit(Ray(Vec3.zero(), Vec3(0.0, 0.0, -1.0)), 0.001, 100.0, rec)
        assert rec.t == pytest.approx(2.0)

    def test_both_roots_outside_interval(self):
        from pathtracer.core.ray import Ray
        from pathtracer.core.vec3 import Vec3
        from pathtracer.geometry import HitRecord, Sphere

        sphere = Sphere(Vec3(0.0, 0.0, -1.0), 0.5, _matte())
        ray = Ray(Vec3.zero(), Vec3(0.0, 0.0, -1.0))

        assert not sphere.hit(ray, 0.001, 0.4, HitRecord())
        assert not sphere.hit(ray, 1.6, 10.0, HitRecord())

    def test_interval_is_open(self):
        """A root exactly at t_min is rejected."""
        from pathtracer.core.ray import Ray
        from pathtracer.core.vec3 import Vec3
        from pathtracer.geometry import HitRecord, Sphere

        sphere = Sphere(Vec3(0.0, 0.0, -1.0), 0.5, _matte())
        ray = Ray(Vec3.zero(), Vec3(0.0, 0.0, -1.0))

        # Roots are 0.5 and 1.5
        assert not sphere.hit(ray, 0.5, 1.0, HitRecord())
        rec = HitRecord()
        assert sphere.hit(ray, 0.5, 2.0, rec)
        assert rec.t == pytest.approx(1.5)

    def test_hit_point_on_surface(self, rng):
        """Accepted hits lie on the sphere and have unit outward normals."""
        from pathtracer.core.ray import Ray
        from pathtracer.core.vec3 import Vec3, dot
        from pathtracer.geometry import HitRecord, Sphere

        center = Vec3(0.3, -0.2, -2.0)
        sphere = Sphere(center, 0.7, _matte())

        hits = 0
        for _ in range(200):
            direction = Vec3(
                float(rng.uniform(-0.4, 0.4)), float(rng.uniform(-0.4, 0.4)), -1.0
            )
            rec = HitRecord()
            if sphere.hit(Ray(Vec3.zero(), direction), 0.001, math.inf, rec):
                hits += 1
                assert abs((rec.point - center).length() - 0.7) < 1e-9
                assert abs(rec.normal.length() - 1.0) < 1e-9
                assert dot(rec.normal, (rec.point - center).unit_vector()) > 0.0
        assert hits > 0
