"""
Unit tests for EvolutionSession.
"""

from unittest.mock import patch

import pytest

from voxbreed.exceptions  import VoxbreedError
from voxbreed.genotype    import Genome, get_preset
from voxbreed.run.config  import Config
from voxbreed.run.session import EvolutionSession
from voxbreed.volume      import MeshingInput


@pytest.fixture
def small_config():
    config = Config()
    config.population_size     = 4
    config.explore_candidates  = 3
    config.behavior_resolution = 6
    config.export_resolution   = 8
    return config


@pytest.fixture
def session(small_config):
    return EvolutionSession(small_config)


class TestSessionStart:
    """Test EvolutionSession.start()."""

    def test_initial_population(self, session):
        population = session.start()
        assert len(population) == 4
        assert session.generation == 0
        for genome in population:
            assert genome.novelty is not None
            assert genome.behavior_descriptor is not None

    def test_start_from_parent(self, session):
        preset     = get_preset("Nebula")
        population = session.start(preset)
        assert population[0].to_dict() == preset.to_dict()
        # new genes never reuse the preset's node IDs or innovation numbers
        for genome in population:
            for node_id, node in genome.node_genes.items():
                if node_id not in preset.node_genes:
                    assert node_id > max(preset.node_genes)
            for innov in genome.conn_genes:
                if innov not in preset.conn_genes:
                    assert innov > max(preset.conn_genes)

    def test_population_is_a_copy(self, session):
        session.start()
        session.population.clear()
        assert len(session.population) == 4


class TestSessionBreed:
    """Test EvolutionSession.select_and_breed()."""

    def test_breed_by_id(self, session):
        population = session.start()
        chosen     = population[2]
        children   = session.select_and_breed([chosen.id])
        assert len(children) == 4
        assert session.generation == 1
        assert children[0].to_dict() == chosen.to_dict()

    def test_breed_from_external_genome(self, session):
        session.start()
        preset   = get_preset("Cells")
        children = session.select_and_breed([preset])
        assert children[0].to_dict() == preset.to_dict()

    def test_unknown_id(self, session):
        session.start()
        with pytest.raises(KeyError):
            session.select_and_breed(["no-such-genome"])

    def test_nothing_selected(self, session):
        session.start()
        with pytest.raises(ValueError):
            session.select_and_breed([])


class TestSessionExplore:
    """Test EvolutionSession.auto_explore()."""

    def test_not_started(self, session):
        with pytest.raises(VoxbreedError):
            session.auto_explore()

    def test_most_novel_survives(self, session):
        session.start()
        before     = session.population
        population = session.auto_explore()
        assert len(population) == 4
        assert session.generation == 1
        assert population[0] in before
        assert population[0].novelty == max(g.novelty for g in before)

    def test_uses_explore_novelty(self, session, small_config):
        session.start()
        with patch("voxbreed.run.session.explore_novelty", side_effect=lambda p, *args: p.clone()) as explore:
            session.auto_explore()
        assert explore.call_count == small_config.population_size - 1
        assert all(call.args[1] == small_config.explore_candidates for call in explore.call_args_list)


class TestSessionExportAndReset:
    """Test export_volume() and reset()."""

    def test_export(self, session):
        result = session.export_volume(get_preset("Mandala"))
        assert isinstance(result, MeshingInput)
        assert result.grid.resolution == 8
        assert result.iso_level == 0.3

    def test_export_resolution_override(self, session):
        assert session.export_volume(Genome(), 5).grid.resolution == 5

    def test_reset(self, session, small_config):
        small_config.novelty_threshold = -1.0
        session.reset()
        session.start()
        session.select_and_breed([session.population[0].id])
        assert session.archive_size > 0
        session.reset()
        assert session.population == []
        assert session.generation == 0
        assert session.archive_size == 0
