"""
Integration tests: genomes flowing through breeding, novelty scoring and
volume export together.
"""

import math

import numpy as np
import pytest
from scipy import ndimage

from voxbreed.activations import ActivationKind
from voxbreed.behavior    import extract_behavior, behavior_to_vector
from voxbreed.behavior.behavior_extractor import HUE_BINS
from voxbreed.exceptions  import MalformedGenome
from voxbreed.genotype    import (Genome, ConnectionGene, NodeGene, NodeType, InnovationTracker,
                                  PRESETS, encode_genome, decode_genome)
from voxbreed.genotype.node_gene import INPUT_X, OUTPUT_DENSITY
from voxbreed.novelty     import NoveltyArchive
from voxbreed.phenotype   import NetworkFast, evaluate
from voxbreed.pool        import create_initial_population, breed_next_generation
from voxbreed.run.config  import Config
from voxbreed.run.session import EvolutionSession
from voxbreed.volume      import VoxelGrid, voxelize, morph_open, keep_largest_component


def _sine_genome() -> Genome:
    """Density = sin(8x): solid slabs perpendicular to the x axis."""
    nodes  = Genome._fixed_nodes() + [NodeGene(9, NodeType.HIDDEN, ActivationKind.SIN)]
    conns  = [ConnectionGene(INPUT_X, 9, 8.0, 0), ConnectionGene(9, OUTPUT_DENSITY, 1.0, 1)]
    return Genome(nodes, conns)


@pytest.fixture
def busy_config():
    """Structural mutations on every call."""
    config = Config()
    config.node_add_probability          = 0.5
    config.connection_add_probability    = 1.0
    config.activation_mutate_probability = 0.5
    config.connection_toggle_probability = 0.5
    return config


class TestEvaluation:
    """Network outputs over evolved genomes."""

    def test_colors_in_unit_range(self, tracker, config):
        population = create_initial_population(6, tracker, config) + [preset.build() for preset in PRESETS]
        coords = np.linspace(-1.0, 1.0, 7)
        for genome in population:
            for x in coords:
                for y in coords:
                    output = evaluate(genome, x, y, -x)
                    assert all(math.isfinite(value) for value in output)
                    assert all(0.0 <= value <= 1.0 for value in (output.r, output.g, output.b))

    def test_batch_matches_points(self, tracker, busy_config):
        genome = Genome.seed(tracker)
        for _ in range(10):
            genome = genome.mutate(tracker, busy_config)
        batch = NetworkFast(genome).forward_pass(np.array([0.3, -0.7]), np.array([0.1, 0.9]), np.array([-0.2, 0.0]))
        point = evaluate(genome, -0.7, 0.9, 0.0)
        assert batch.density[1] == pytest.approx(point.density, rel=1e-9, abs=1e-12)
        assert batch.g[1]       == pytest.approx(point.g, rel=1e-9, abs=1e-12)


class TestBreeding:
    """Structural invariants under repeated mutation and crossover."""

    def test_mutation_keeps_networks_acyclic(self, busy_config):
        trials = 0
        for _ in range(100):
            tracker = InnovationTracker()
            genome  = Genome.seed(tracker)
            for _ in range(100):
                genome = genome.mutate(tracker, busy_config)
                assert not genome.has_cycle(enabled_only=True)
                trials += 1
            genome.validate()
        assert trials == 10_000

    def test_crossover_of_identical_parents(self, tracker, busy_config):
        parent = Genome.seed(tracker)
        for _ in range(5):
            parent = parent.mutate(tracker, busy_config)
        child = parent.crossover(parent)
        assert child.id != parent.id
        assert child.to_dict() == parent.to_dict()

    def test_generations_stay_valid(self, tracker, busy_config):
        population = create_initial_population(5, tracker, busy_config)
        for _ in range(5):
            population = breed_next_generation(population[:3], 5, tracker, busy_config)
            for genome in population:
                genome.validate()
                assert not genome.has_cycle(enabled_only=True)

    def test_innovations_never_reused(self, tracker, busy_config):
        population = create_initial_population(5, tracker, busy_config)
        seen = {}
        for genome in population:
            for innov, conn in genome.conn_genes.items():
                endpoints = (conn.node_in, conn.node_out)
                assert seen.setdefault(innov, endpoints) == endpoints


class TestBehaviorAndNovelty:
    """Behaviors of real genomes and their novelty."""

    def test_descriptor_shape(self):
        for preset in PRESETS:
            vector = behavior_to_vector(extract_behavior(preset.build()))
            assert vector.shape == (22,)
            assert np.all(np.isfinite(vector))
            assert vector[:HUE_BINS].sum() == pytest.approx(1.0)
            assert vector[11:15].sum() == pytest.approx(1.0)

    def test_sparseness_edges(self):
        behavior = extract_behavior(PRESETS[0].build())
        archive  = NoveltyArchive(k=3)
        assert archive.calculate_sparseness(behavior) == math.inf
        archive.maybe_add(behavior, "first")
        assert archive.calculate_sparseness(behavior) == 0.0


class TestVolume:
    """Voxelization and cleanup."""

    def test_blobs_keep_largest(self):
        volume = np.zeros((12, 12, 12))
        volume[1:3, 1:3, 1:3]   = 0.8
        volume[1, 1, 3:5]       = 0.8
        volume[6:11, 6:11, 6:8] = 1.0
        grid    = VoxelGrid.from_volume(volume)
        cleaned = keep_largest_component(grid, 0.3)
        assert grid.solid_count(0.3) == 60
        assert cleaned.solid_count(0.3) == 50
        assert np.all(cleaned.volume[6:11, 6:11, 6:8] == 1.0)
        assert np.all(cleaned.volume[1:3, 1:3, 1:3] == 0.3 - 1.0)
        assert np.all(cleaned.volume[1, 1, 3:5] == 0.3 - 1.0)

    def test_end_to_end_export(self, tracker, config):
        genome = Genome.seed(tracker)
        for _ in range(5):
            genome = genome.mutate(tracker, config)

        for candidate in (genome, _sine_genome()):
            grid    = voxelize(candidate, 30)
            opened  = morph_open(grid)
            cleaned = keep_largest_component(opened, 0.3)
            assert cleaned.data.shape == (30 ** 3,)
            assert np.all(np.isfinite(cleaned.data))
            assert np.allclose(morph_open(opened).data, opened.data)
            assert cleaned.solid_count(0.3) <= opened.solid_count(0.3)

    def test_export_is_one_component(self):
        grid    = morph_open(voxelize(_sine_genome(), 30))
        cleaned = keep_largest_component(grid, 0.3)
        _, count = ndimage.label(cleaned.volume >= 0.3)
        assert count == 1


class TestSharing:
    """Shared genomes re-entering a run."""

    def test_decode_garbage(self):
        with pytest.raises(MalformedGenome):
            decode_genome("definitely not a genome")

    def test_shared_genome_seeds_session(self):
        config = Config()
        config.population_size     = 3
        config.behavior_resolution = 6
        shared  = _sine_genome()
        decoded = decode_genome(encode_genome(shared))
        session = EvolutionSession(config)
        population = session.start(decoded)
        assert len(population) == 3
        assert population[0].to_dict() == shared.to_dict()
        population = session.select_and_breed([population[1].id, population[2].id])
        assert session.generation == 1
        assert all(genome.novelty is not None for genome in population)
