"""
Unit tests for NoveltyArchive.
"""

import math

import pytest

from voxbreed.behavior         import BehaviorDescriptor, Symmetry, AverageColor
from voxbreed.novelty          import NoveltyArchive, ArchiveEntry
from voxbreed.run.config       import Config


def behavior_at(value: float) -> BehaviorDescriptor:
    """A behavior whose distance to behavior_at(w) is |value - w|."""
    return BehaviorDescriptor(hue_histogram   = (value,) + (0.0,) * 7,
                              symmetry        = Symmetry(0.0, 0.0, 0.0),
                              frequency_bands = (0.0,) * 4,
                              radial_density  = (0.0,) * 4,
                              average_color   = AverageColor(0.0, 0.0, 0.0))


class TestCalculateSparseness:
    """Test NoveltyArchive.calculate_sparseness()."""

    def test_empty_pool_is_infinitely_novel(self):
        assert NoveltyArchive().calculate_sparseness(behavior_at(0.0)) == math.inf

    def test_identical_behavior_has_zero_sparseness(self):
        archive = NoveltyArchive(k=1)
        assert archive.calculate_sparseness(behavior_at(0.4), [behavior_at(0.4)]) == 0.0

    def test_mean_of_k_nearest(self):
        archive = NoveltyArchive(k=2)
        population = [behavior_at(v) for v in (1.0, 0.2, 0.5, 3.0)]
        assert archive.calculate_sparseness(behavior_at(0.0), population) == pytest.approx((0.2 + 0.5) / 2)

    def test_fewer_neighbours_than_k(self):
        archive = NoveltyArchive(k=15)
        population = [behavior_at(1.0), behavior_at(3.0)]
        assert archive.calculate_sparseness(behavior_at(0.0), population) == pytest.approx(2.0)

    def test_pools_archive_and_population(self):
        archive = NoveltyArchive(k=2, threshold=0.0)
        archive.maybe_add(behavior_at(0.1), "a")
        assert archive.calculate_sparseness(behavior_at(0.0), [behavior_at(0.3)]) == pytest.approx(0.2)


class TestMaybeAdd:
    """Test NoveltyArchive.maybe_add()."""

    def test_first_behavior_always_admitted(self):
        archive = NoveltyArchive()
        added, sparseness = archive.maybe_add(behavior_at(0.0), "g0")
        assert added is True
        assert sparseness == math.inf
        assert archive.size == 1
        assert archive.entries[0] == ArchiveEntry(behavior_at(0.0), "g0", 0)

    def test_threshold_is_strict(self):
        archive = NoveltyArchive(k=1, threshold=0.5)
        archive.maybe_add(behavior_at(0.0), "g0")
        added, sparseness = archive.maybe_add(behavior_at(0.5), "g1")
        assert sparseness == pytest.approx(0.5)
        assert added is False
        added, _ = archive.maybe_add(behavior_at(0.6), "g2")
        assert added is True
        assert archive.size == 2

    def test_fifo_eviction(self):
        archive = NoveltyArchive(k=1, threshold=0.0, max_size=3)
        for i in range(5):
            archive.maybe_add(behavior_at(float(i)), f"g{i}")
        assert archive.size == 3
        assert [entry.genome_id for entry in archive.entries] == ["g2", "g3", "g4"]
        assert [entry.insertion_order for entry in archive.entries] == [2, 3, 4]

    def test_evicted_behavior_no_longer_counts(self):
        archive = NoveltyArchive(k=1, threshold=0.0, max_size=1)
        archive.maybe_add(behavior_at(0.0), "old")
        archive.maybe_add(behavior_at(5.0), "new")
        assert archive.calculate_sparseness(behavior_at(0.0)) == pytest.approx(5.0)

    def test_entries_are_read_only(self):
        archive = NoveltyArchive()
        archive.maybe_add(behavior_at(0.0), "g0")
        entries = archive.entries
        assert isinstance(entries, tuple)
        with pytest.raises(AttributeError):
            entries[0].genome_id = "other"


class TestArchiveUtilities:
    """Test size, clear and construction."""

    def test_clear(self):
        archive = NoveltyArchive(threshold=0.0)
        for i in range(4):
            archive.maybe_add(behavior_at(float(i)), f"g{i}")
        archive.clear()
        assert archive.size == 0
        assert len(archive) == 0
        assert archive.calculate_sparseness(behavior_at(0.0)) == math.inf

    def test_defaults(self):
        archive = NoveltyArchive()
        assert (archive.k, archive.threshold, archive.max_size) == (15, 0.3, 500)

    def test_from_config(self):
        config = Config()
        config.novelty_k         = 4
        config.novelty_threshold = 0.7
        config.archive_max_size  = 12
        archive = NoveltyArchive.from_config(config)
        assert (archive.k, archive.threshold, archive.max_size) == (4, 0.7, 12)

    @pytest.mark.parametrize("kwargs", [{"k": 0}, {"max_size": 0}])
    def test_invalid_parameters(self, kwargs):
        with pytest.raises(ValueError):
            NoveltyArchive(**kwargs)
