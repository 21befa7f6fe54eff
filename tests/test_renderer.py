"""Tests for RenderConfig, Renderer and PixelBuffer."""

import numpy as np
import pytest


class TestRenderConfig:
    """Tests for configuration validation."""

    def test_defaults(self):
        """Test the default sampling parameters."""
        from skytracer.core.renderer import RenderConfig

        config = RenderConfig(width=1920, height=1080)
        assert config.samples_per_pixel == 100
        assert config.max_bounce_depth == 50
        assert config.seed == 0

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"width": 0, "height": 10},
            {"width": 10, "height": -5},
            {"width": 4096, "height": 10},
            {"width": 10, "height": 10, "samples_per_pixel": 0},
            {"width": 10, "height": 10, "max_bounce_depth": -1},
        ],
    )
    def test_invalid_config(self, kwargs):
        """Test that invalid settings raise ConfigurationError."""
        from skytracer.core.renderer import ConfigurationError, RenderConfig

        with pytest.raises(ConfigurationError):
            RenderConfig(**kwargs)

    def test_configuration_error_is_value_error(self):
        """Test that ConfigurationError can be caught as ValueError."""
        from skytracer.core.renderer import RenderConfig

        with pytest.raises(ValueError):
            RenderConfig(width=10, height=10, samples_per_pixel=0)

    def test_zero_depth_allowed(self):
        """Test that a zero bounce budget is a valid configuration."""
        from skytracer.core.renderer import RenderConfig

        assert RenderConfig(width=4, height=4, max_bounce_depth=0).max_bounce_depth == 0


class TestRenderer:
    """Tests for the Renderer."""

    def test_render_returns_buffer(self):
        """Test that render produces a buffer of the configured size."""
        from skytracer.core.renderer import RenderConfig, Renderer
        from skytracer.scene.presets import create_two_sphere_scene

        world, camera = create_two_sphere_scene()
        buffer = Renderer(RenderConfig(width=16, height=9, samples_per_pixel=2)).render(
            world, camera
        )
        assert (buffer.width, buffer.height) == (16, 9)
        assert buffer.pixels.shape == (9, 16, 3)
        assert np.isfinite(buffer.pixels).all()

    def test_empty_world_renders_sky(self):
        """Test that every pixel of an empty world lies on the sky gradient."""
        from skytracer.camera.pinhole import PinholeCamera
        from skytracer.core.renderer import RenderConfig, Renderer
        from skytracer.scene.world import World

        buffer = Renderer(RenderConfig(width=12, height=8, samples_per_pixel=3)).render(
            World(), PinholeCamera()
        )
        pixels = buffer.pixels
        np.testing.assert_allclose(pixels[..., 2], 1.0, atol=1e-5)
        assert (pixels[..., 0] >= 0.5 - 1e-5).all()
        assert (pixels[..., 0] <= 1.0 + 1e-5).all()
        # Higher rows look further up and are bluer (lower red)
        assert pixels[-1, :, 0].mean() < pixels[0, :, 0].mean()

    def test_zero_depth_renders_black(self):
        """Test that max_bounce_depth 0 gives a black image."""
        from skytracer.core.renderer import RenderConfig, Renderer
        from skytracer.scene.presets import create_default_scene

        world, camera = create_default_scene()
        config = RenderConfig(width=8, height=4, samples_per_pixel=2, max_bounce_depth=0)
        buffer = Renderer(config).render(world, camera)
        assert (buffer.pixels == 0.0).all()

    def test_progress_callback(self):
        """Test that the callback reports every band and ends at the full height."""
        from skytracer.core.renderer import RenderConfig, Renderer
        from skytracer.scene.presets import create_two_sphere_scene

        world, camera = create_two_sphere_scene()
        calls = []
        Renderer(RenderConfig(width=6, height=10, samples_per_pixel=1)).render(
            world, camera, rows_per_batch=4, callback=lambda done, total: calls.append((done, total))
        )
        assert calls == [(4, 10), (8, 10), (10, 10)]

    def test_render_progressive_generator(self):
        """Test the generator form of progressive rendering."""
        from skytracer.core.renderer import RenderConfig, Renderer
        from skytracer.scene.presets import create_two_sphere_scene

        world, camera = create_two_sphere_scene()
        renderer = Renderer(RenderConfig(width=6, height=5, samples_per_pixel=1))
        progress = list(renderer.render_progressive(world, camera, rows_per_batch=2))
        assert progress == [(2, 5), (4, 5), (5, 5)]
        assert renderer.get_pixel_buffer().pixels.shape == (5, 6, 3)

    def test_invalid_batch_size(self):
        """Test that a non-positive band size raises ValueError."""
        from skytracer.core.renderer import RenderConfig, Renderer
        from skytracer.scene.presets import create_two_sphere_scene

        world, camera = create_two_sphere_scene()
        with pytest.raises(ValueError):
            Renderer(RenderConfig(width=4, height=4)).render(world, camera, rows_per_batch=0)

    def test_replaced_world_is_rejected(self):
        """Test that rendering a World replaced by a newer one raises RuntimeError."""
        from skytracer.camera.pinhole import PinholeCamera
        from skytracer.core.renderer import RenderConfig, Renderer
        from skytracer.scene.world import World

        a = World()
        a.add_matte_sphere((0.0, 0.0, -1.0), 0.5, (0.8, 0.3, 0.3))
        World()

        renderer = Renderer(RenderConfig(width=5, height=3, samples_per_pixel=1))
        with pytest.raises(RuntimeError, match="no longer live"):
            renderer.render(a, PinholeCamera())
        with pytest.raises(RuntimeError, match="no longer live"):
            next(renderer.render_progressive(a, PinholeCamera()))

    def test_band_size_does_not_change_image(self):
        """Test that the image is independent of how rows are batched."""
        from skytracer.core.renderer import RenderConfig, Renderer
        from skytracer.scene.presets import create_default_scene

        world, camera = create_default_scene()
        renderer = Renderer(RenderConfig(width=10, height=6, samples_per_pixel=2, seed=5))
        a = renderer.render(world, camera, rows_per_batch=1).pixels
        b = renderer.render(world, camera, rows_per_batch=6).pixels
        np.testing.assert_allclose(a, b, atol=1e-6)

    def test_seed_changes_image(self):
        """Test that different seeds give different noise."""
        from skytracer.core.renderer import RenderConfig, Renderer
        from skytracer.scene.presets import create_two_sphere_scene

        world, camera = create_two_sphere_scene()
        a = Renderer(RenderConfig(width=10, height=6, samples_per_pixel=1, seed=1)).render(
            world, camera
        )
        b = Renderer(RenderConfig(width=10, height=6, samples_per_pixel=1, seed=2)).render(
            world, camera
        )
        assert not np.array_equal(a.pixels, b.pixels)


class TestPixelBuffer:
    """Tests for the PixelBuffer container."""

    def test_pixel_lookup(self):
        """Test that pixel(x, y) reads pixels[y, x]."""
        from skytracer.core.pixel_buffer import PixelBuffer

        pixels = np.zeros((2, 3, 3), dtype=np.float32)
        pixels[1, 2] = (0.25, 0.5, 0.75)
        buffer = PixelBuffer(width=3, height=2, pixels=pixels)
        assert buffer.pixel(2, 1) == (0.25, 0.5, 0.75)
        assert buffer.pixel(0, 0) == (0.0, 0.0, 0.0)

    def test_read_only(self):
        """Test that the pixel array cannot be modified."""
        from skytracer.core.pixel_buffer import PixelBuffer

        buffer = PixelBuffer(width=2, height=2, pixels=np.zeros((2, 2, 3)))
        with pytest.raises(ValueError):
            buffer.pixels[0, 0, 0] = 1.0

    def test_copies_input(self):
        """Test that later changes to the source array do not leak in."""
        from skytracer.core.pixel_buffer import PixelBuffer

        source = np.zeros((1, 1, 3), dtype=np.float32)
        buffer = PixelBuffer(width=1, height=1, pixels=source)
        source[0, 0, 0] = 1.0
        assert buffer.pixel(0, 0) == (0.0, 0.0, 0.0)

    @pytest.mark.parametrize(
        "width, height, shape",
        [(2, 2, (2, 3, 3)), (2, 2, (2, 2, 4)), (0, 1, (1, 0, 3))],
    )
    def test_shape_validation(self, width, height, shape):
        """Test that mismatched shapes and empty images are rejected."""
        from skytracer.core.pixel_buffer import PixelBuffer

        with pytest.raises(ValueError):
            PixelBuffer(width=width, height=height, pixels=np.zeros(shape))

    def test_rows_and_encoding(self):
        """Test row iteration order and 8-bit encoding."""
        from skytracer.core.pixel_buffer import PixelBuffer

        pixels = np.zeros((2, 1, 3), dtype=np.float32)
        pixels[1, 0] = (1.0, 0.25, 0.0)
        buffer = PixelBuffer(width=1, height=2, pixels=pixels)

        rows = list(buffer.rows)
        assert len(rows) == 2
        assert rows[1][0].tolist() == [1.0, 0.25, 0.0]
        assert buffer.encoded()[1, 0].tolist() == [255, 127, 0]
