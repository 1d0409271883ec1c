"""
Unit tests for the behavior extractor.
"""

from unittest.mock import patch

import numpy as np
import pytest

from voxbreed.behavior           import (BEHAVIOR_SIZE, BehaviorDescriptor, extract_behavior,
                                         behavior_to_vector, behavior_distance, rgb_to_hue)
from voxbreed.genotype           import Genome, ConnectionGene, get_preset
from voxbreed.genotype.node_gene import INPUT_X, INPUT_D, OUTPUT_R, OUTPUT_B
from voxbreed.phenotype          import BatchOutput
from voxbreed.behavior.behavior_extractor import _radial_symmetry


def field_output(r, g=None, b=None):
    """Network output holding a fixed color field, indexed [y, x]."""
    r = np.asarray(r, dtype=np.float64)
    g = r if g is None else np.asarray(g, dtype=np.float64)
    b = r if b is None else np.asarray(b, dtype=np.float64)
    return BatchOutput(np.zeros_like(r), r, g, b)


# White on the right edge of the two middle rows, black elsewhere.
# Rows 1 and 2 are equal, as are columns 1 and 2, so the sampled pixels do
# not depend on how the center (1.5) is rounded.
EDGE_FIELD = [[0.0, 0.0, 0.0, 0.0],
              [0.0, 0.0, 0.0, 1.0],
              [0.0, 0.0, 0.0, 1.0],
              [0.0, 0.0, 0.0, 0.0]]


def x_gradient_genome():
    """Red grows along x; the pattern is mirror symmetric top/bottom only."""
    return Genome(Genome._fixed_nodes(), [ConnectionGene(INPUT_X, OUTPUT_R, 5.0, 0)])


class TestRgbToHue:
    """Test rgb_to_hue()."""

    @pytest.mark.parametrize("rgb, hue", [
        ((1.0, 0.0, 0.0), 0.0),
        ((0.0, 1.0, 0.0), 1 / 3),
        ((0.0, 0.0, 1.0), 2 / 3),
        ((1.0, 1.0, 0.0), 1 / 6),
        ((1.0, 0.0, 1.0), 5 / 6),
        ((0.4, 0.4, 0.4), 0.0),
    ])
    def test_hue(self, rgb, hue):
        assert rgb_to_hue(*rgb) == pytest.approx(hue)

    def test_hue_range(self):
        rng = np.random.default_rng(1)
        for r, g, b in rng.uniform(0, 1, size=(200, 3)):
            assert 0.0 <= rgb_to_hue(r, g, b) < 1.0


class TestExtractBehavior:
    """Test extract_behavior()."""

    def test_uniform_gray_pattern(self):
        behavior = extract_behavior(Genome())
        assert behavior.hue_histogram == (1.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0)
        assert behavior.symmetry.horizontal == pytest.approx(1.0)
        assert behavior.symmetry.vertical == pytest.approx(1.0)
        assert behavior.symmetry.radial == pytest.approx(1.0)
        assert behavior.frequency_bands == (1.0, 0.0, 0.0, 0.0)
        assert behavior.radial_density == pytest.approx((0.5, 0.5, 0.5, 0.5))
        assert behavior.average_color == pytest.approx((0.5, 0.5, 0.5))

    def test_horizontal_gradient_symmetry(self):
        behavior = extract_behavior(x_gradient_genome())
        assert behavior.symmetry.horizontal < 1.0
        assert behavior.symmetry.vertical == pytest.approx(1.0)

    def test_radial_pattern_brightness_rings(self):
        genome = Genome(Genome._fixed_nodes(), [ConnectionGene(INPUT_D, OUTPUT_B, 6.0, 0)])
        behavior = extract_behavior(genome)
        rings = behavior.radial_density
        assert rings[0] < rings[1] < rings[2] < rings[3]

    def test_normalized_slices(self, seed_genome, tracker):
        genome = seed_genome
        for _ in range(10):
            genome = genome.mutate(tracker)
            behavior = extract_behavior(genome)
            assert sum(behavior.hue_histogram) == pytest.approx(1.0, abs=1e-9)
            assert sum(behavior.frequency_bands) == pytest.approx(1.0, abs=1e-9)
            assert 0.0 <= behavior.symmetry.radial <= 1.0
            assert all(0.0 <= v <= 1.0 for v in behavior.radial_density)
            assert all(0.0 <= v <= 1.0 for v in behavior.average_color)

    @pytest.mark.parametrize("resolution", [2, 3, 8, 17])
    def test_other_resolutions(self, resolution):
        behavior = extract_behavior(get_preset("Mandala"), resolution)
        assert sum(behavior.hue_histogram) == pytest.approx(1.0)
        assert sum(behavior.frequency_bands) == pytest.approx(1.0)

    def test_deterministic(self):
        genome = get_preset("Crystal")
        assert extract_behavior(genome) == extract_behavior(genome)

    def test_invalid_resolution(self):
        with pytest.raises(ValueError):
            extract_behavior(Genome(), 1)


class TestBehaviorVector:
    """Test behavior_to_vector() and behavior_distance()."""

    def test_vector_layout(self):
        behavior = extract_behavior(get_preset("Nebula"))
        vector   = behavior_to_vector(behavior)
        assert BEHAVIOR_SIZE == 22
        assert vector.shape == (22,)
        assert list(vector[:8]) == list(behavior.hue_histogram)
        assert list(vector[8:11]) == list(behavior.symmetry)
        assert list(vector[11:15]) == list(behavior.frequency_bands)
        assert list(vector[15:19]) == list(behavior.radial_density)
        assert list(vector[19:]) == list(behavior.average_color)

    def test_distance(self):
        a = extract_behavior(get_preset("Nebula"))
        b = extract_behavior(get_preset("Flame"))
        assert behavior_distance(a, a) == 0.0
        assert behavior_distance(a, b) == pytest.approx(behavior_distance(b, a))
        assert behavior_distance(a, b) == pytest.approx(
            float(np.sqrt(np.sum((behavior_to_vector(a) - behavior_to_vector(b)) ** 2))))
        assert behavior_distance(a, b) > 0.0

    def test_descriptor_is_immutable(self):
        behavior = extract_behavior(Genome())
        assert isinstance(behavior, BehaviorDescriptor)
        with pytest.raises(AttributeError):
            behavior.hue_histogram = ()


class TestBehaviorOfKnownField:
    """Test extract_behavior() on hand-computed 4x4 fields."""

    def extract(self, output):
        with patch("voxbreed.behavior.behavior_extractor.NetworkFast") as network:
            network.return_value.forward_pass.return_value = output
            return extract_behavior(Genome(), 4)

    def test_edge_field(self):
        behavior = self.extract(field_output(EDGE_FIELD))

        # (0,1) and (1,0) both compare the right middle pixel with the bottom, left and
        # top middle pixels: 3 differences of 3 each. (1,1) samples the center 4 times,
        # (0,0) samples outside the grid.
        assert behavior.symmetry.radial == pytest.approx(1 - 2 * 9 / 36)
        # columns 0/3 differ in rows 1 and 2
        assert behavior.symmetry.horizontal == pytest.approx(1 - 6 / 24)
        assert behavior.symmetry.vertical == pytest.approx(1.0)
        assert behavior.frequency_bands == pytest.approx((10 / 12, 0.0, 0.0, 2 / 12))
        assert behavior.hue_histogram == (1.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0)
        assert behavior.average_color == pytest.approx((0.125, 0.125, 0.125))

    def test_band_edges(self):
        red   = [[0.0, 0.25, 0.5, 1.0],
                 [0.0, 0.0 , 0.0, 0.75],
                 [0.0, 0.0 , 0.0, 0.0],
                 [0.0, 0.0 , 0.0, 0.0]]
        zeros = np.zeros((4, 4))
        behavior = self.extract(field_output(red, zeros, zeros))

        # differences 0.25 and 0.5 start bands 1 and 2, 0.75 starts band 3
        assert behavior.frequency_bands == pytest.approx((8 / 12, 2 / 12, 1 / 12, 1 / 12))


class TestRadialSymmetry:
    """Test the radial symmetry score."""

    def test_edge_field(self):
        colors = np.repeat(np.asarray(EDGE_FIELD)[..., np.newaxis], 3, axis=-1)
        assert _radial_symmetry(colors, 4) == pytest.approx(0.5)

    def test_uniform_field(self):
        assert _radial_symmetry(np.full((6, 6, 3), 0.3), 6) == 1.0

    def test_clamped_at_zero(self):
        colors = np.zeros((4, 4, 3))
        colors[1:3, 3] = 5.0
        assert _radial_symmetry(colors, 4) == 0.0
