"""Tests for Voronoi diagram rasterisation."""

import numpy as np
import pytest
from py_voronoi.core import voronoi
from py_voronoi.core.alea_prng import AleaPRNG
from py_voronoi.core.color import Luminosity, RandomColorConfig, Rgb, lerp_color
from py_voronoi.core.geometry import BoundingBox, Point
from py_voronoi.core.kdtree import KdTree
from py_voronoi.core.sampling import generate_distinct_random_points
from py_voronoi.core.voronoi import (
    GradientShader,
    gradient_voronoi,
    new_image,
    random_voronoi,
    rasterize,
    render_band,
)

WIDTH = 40
HEIGHT = 30


@pytest.fixture
def image():
    return new_image(WIDTH, HEIGHT, fill=(12, 34, 56))


def unique_colors(img):
    return {tuple(c) for c in img.reshape(-1, 3)}


class TestNewImage:
    """Test image buffer allocation."""

    def test_shape_and_fill(self):
        """Test that the buffer has the right shape, dtype and fill."""
        img = new_image(4, 3, fill=(1, 2, 3))
        assert img.shape == (3, 4, 3)
        assert img.dtype == np.uint8
        assert unique_colors(img) == {(1, 2, 3)}

    def test_negative_size(self):
        """Test that negative sizes are rejected."""
        with pytest.raises(ValueError):
            new_image(-1, 3)


class TestRasterize:
    """Test the per-pixel nearest-neighbour loop."""

    @pytest.fixture
    def tree(self):
        prng = AleaPRNG("rasterize")
        points = generate_distinct_random_points(prng, 25, BoundingBox.from_dimensions(WIDTH, HEIGHT))
        return KdTree.from_vector([(p, Rgb(i * 10, 255 - i * 10, i)) for i, p in enumerate(points)])

    def test_every_pixel_gets_nearest_color(self, image, tree):
        """Test that each pixel carries its nearest seed's colour."""
        rasterize(image, tree, workers=1)
        for y in range(HEIGHT):
            for x in range(WIDTH):
                _, color = tree.nearest_neighbor(Point(x, y))
                assert tuple(image[y, x]) == tuple(color)

    def test_parallel_matches_sequential(self, tree):
        """Test that parallel and sequential rendering agree."""
        sequential = new_image(WIDTH, HEIGHT)
        parallel = new_image(WIDTH, HEIGHT)
        rasterize(sequential, tree, workers=1)
        rasterize(parallel, tree, workers=4)
        np.testing.assert_array_equal(sequential, parallel)

    def test_parallel_uses_process_pool(self, tree, monkeypatch):
        """Test that several workers render in separate processes."""
        created = []

        class RecordingExecutor(voronoi.ProcessPoolExecutor):
            def __init__(self, *args, **kwargs):
                created.append(kwargs.get("max_workers"))
                super().__init__(*args, **kwargs)

        monkeypatch.setattr(voronoi, "ProcessPoolExecutor", RecordingExecutor)
        img = new_image(WIDTH, HEIGHT)
        rasterize(img, tree, workers=3)
        assert created == [3]

        expected = new_image(WIDTH, HEIGHT)
        rasterize(expected, tree, workers=1)
        np.testing.assert_array_equal(img, expected)

    def test_single_worker_stays_in_process(self, tree, monkeypatch):
        """Test that one worker never starts a pool."""
        def fail(*args, **kwargs):
            raise AssertionError("pool started")

        monkeypatch.setattr(voronoi, "ProcessPoolExecutor", fail)
        rasterize(new_image(WIDTH, HEIGHT), tree, workers=1)

    def test_color_of_receives_nearest_seed(self, image, tree):
        """Test that the colour hook maps each nearest seed and payload to the pixel."""
        def invert(point, payload):
            return Rgb(255 - payload.r, 255 - payload.g, point.x)

        rasterize(image, tree, color_of=invert, workers=1)
        for y in range(0, HEIGHT, 4):
            for x in range(0, WIDTH, 4):
                point, color = tree.nearest_neighbor(Point(x, y))
                assert tuple(image[y, x]) == (255 - color.r, 255 - color.g, point.x)

    def test_shader_in_workers_matches_sequential(self, tree):
        """Test that a picklable colour hook gives the same image across processes."""
        shader = GradientShader(Rgb(0, 0, 0), Rgb(255, 128, 64), WIDTH)
        sequential = new_image(WIDTH, HEIGHT)
        parallel = new_image(WIDTH, HEIGHT)
        rasterize(sequential, tree, shader, workers=1)
        rasterize(parallel, tree, shader, workers=2)
        np.testing.assert_array_equal(sequential, parallel)

    def test_more_workers_than_rows(self, tree):
        """Test that surplus workers are capped at the row count."""
        img = new_image(WIDTH, 2)
        rasterize(img, tree, workers=16)
        expected = new_image(WIDTH, 2)
        rasterize(expected, tree, workers=1)
        np.testing.assert_array_equal(img, expected)

    def test_empty_tree_is_fatal(self, image):
        """Test that an empty tree raises before any pixel is written."""
        before = image.copy()
        with pytest.raises(RuntimeError):
            rasterize(image, KdTree.from_vector([]))
        np.testing.assert_array_equal(image, before)

    def test_rejects_bad_buffer(self, tree):
        """Test that non-RGB or non-uint8 buffers are rejected."""
        with pytest.raises(ValueError):
            rasterize(np.zeros((HEIGHT, WIDTH), dtype=np.uint8), tree)
        with pytest.raises(ValueError):
            rasterize(np.zeros((HEIGHT, WIDTH, 3), dtype=np.float32), tree)


class TestRenderBand:
    """Test rendering a slice of rows."""

    def test_band_matches_rows_of_full_image(self):
        """Test that a band equals the same rows of a full render."""
        points = [Point(2, 2), Point(30, 5), Point(15, 25)]
        tree = KdTree.from_vector([(p, Rgb(i * 80, 0, 0)) for i, p in enumerate(points)])
        full = new_image(WIDTH, HEIGHT)
        rasterize(full, tree, workers=1)

        band = render_band(tree, WIDTH, 10, 17)
        assert band.shape == (7, WIDTH, 3)
        assert band.dtype == np.uint8
        np.testing.assert_array_equal(band, full[10:17])

    def test_empty_band(self):
        """Test that an empty row range gives an empty band."""
        tree = KdTree.from_vector([(Point(0, 0), Rgb(1, 2, 3))])
        assert render_band(tree, WIDTH, 5, 5).shape == (0, WIDTH, 3)


class TestGradientShader:
    """Test gradient colouring of a seed."""

    def test_endpoints(self):
        """Test that x=0 gives color1 and x=width gives color2."""
        shader = GradientShader(Rgb(0, 0, 0), Rgb(200, 100, 50), 100)
        assert shader(Point(0, 7)) == lerp_color(Rgb(0, 0, 0), Rgb(200, 100, 50), 0.0)
        assert shader(Point(100, 7)) == lerp_color(Rgb(0, 0, 0), Rgb(200, 100, 50), 1.0)

    def test_ignores_payload_and_y(self):
        """Test that only the seed's x coordinate matters."""
        shader = GradientShader(Rgb(0, 0, 0), Rgb(200, 100, 50), 100)
        assert shader(Point(40, 0), "a") == shader(Point(40, 99), None)

    def test_zero_width_uses_first_color(self):
        """Test that a zero-width canvas does not divide by zero."""
        shader = GradientShader(Rgb(9, 8, 7), Rgb(200, 100, 50), 0)
        assert shader(Point(0, 0)) == lerp_color(Rgb(9, 8, 7), Rgb(200, 100, 50), 0.0)


class TestRandomVoronoi:
    """Test palette mode."""

    def test_zero_points_leaves_image_untouched(self, image):
        """Test that zero seeds leave the image untouched."""
        before = image.copy()
        random_voronoi(image, RandomColorConfig(AleaPRNG("c")), 0, prng=AleaPRNG("p"))
        np.testing.assert_array_equal(image, before)

    def test_single_point_is_flat(self, image):
        """Test that a single seed paints one flat colour."""
        random_voronoi(image, RandomColorConfig(AleaPRNG("c")), 1, prng=AleaPRNG("p"), workers=2)
        assert len(unique_colors(image)) == 1

    def test_colors_come_from_palette(self, image):
        """Test that pixel colours come from the seed palette."""
        npoints = 12
        config = RandomColorConfig(AleaPRNG("palette"), luminosity=Luminosity.BRIGHT)
        random_voronoi(image, config, npoints, prng=AleaPRNG("points"), workers=1)
        assert 1 < len(unique_colors(image)) <= npoints

    def test_reproducible(self):
        """Test that the same seeds render the same image for any worker count."""
        a = new_image(WIDTH, HEIGHT)
        b = new_image(WIDTH, HEIGHT)
        random_voronoi(a, RandomColorConfig(AleaPRNG("c")), 20, prng=AleaPRNG("p"), workers=1)
        random_voronoi(b, RandomColorConfig(AleaPRNG("c")), 20, prng=AleaPRNG("p"), workers=3)
        np.testing.assert_array_equal(a, b)

    def test_too_many_points_fails_before_writing(self):
        """Test that an impossible point count fails before writing."""
        img = new_image(2, 2, fill=(9, 9, 9))
        before = img.copy()
        with pytest.raises(ValueError):
            random_voronoi(img, RandomColorConfig(AleaPRNG("c")), 10, prng=AleaPRNG("p"))
        np.testing.assert_array_equal(img, before)


class TestGradientVoronoi:
    """Test gradient mode."""

    COLOR1 = Rgb(0, 0, 0)
    COLOR2 = Rgb(200, 100, 50)

    def test_zero_points_leaves_image_untouched(self, image):
        """Test that zero seeds leave the image untouched."""
        before = image.copy()
        gradient_voronoi(image, self.COLOR1, self.COLOR2, 0)
        np.testing.assert_array_equal(image, before)

    def test_cells_shaded_by_seed_x(self, image):
        """Test that each pixel carries the gradient colour of its nearest seed, not its own x."""
        npoints = 15
        gradient_voronoi(image, self.COLOR1, self.COLOR2, npoints, prng=AleaPRNG("g"), workers=1)

        seeds = generate_distinct_random_points(
            AleaPRNG("g"), npoints, BoundingBox.from_dimensions(WIDTH, HEIGHT)
        )
        allowed = {tuple(lerp_color(self.COLOR1, self.COLOR2, p.x / WIDTH)) for p in seeds}
        assert unique_colors(image) <= allowed

        tree = KdTree.from_vector([(p, None) for p in seeds])
        for y in range(0, HEIGHT, 3):
            for x in range(0, WIDTH, 3):
                nearest, _ = tree.nearest_neighbor(Point(x, y))
                expected_distance = nearest.squared_distance(Point(x, y))
                # any seed at the same distance may own the pixel
                candidates = {
                    tuple(lerp_color(self.COLOR1, self.COLOR2, p.x / WIDTH))
                    for p in seeds if p.squared_distance(Point(x, y)) == expected_distance
                }
                assert tuple(image[y, x]) in candidates

    def test_single_point_is_flat(self, image):
        """Test that a single seed paints one flat colour."""
        gradient_voronoi(image, self.COLOR1, self.COLOR2, 1, prng=AleaPRNG("one"))
        assert len(unique_colors(image)) == 1

    def test_identical_endpoints(self, image):
        """Test that equal endpoints give a single colour."""
        gradient_voronoi(image, self.COLOR2, self.COLOR2, 10, prng=AleaPRNG("same"))
        assert unique_colors(image) == {tuple(self.COLOR2)}
