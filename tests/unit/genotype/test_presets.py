"""
Unit tests for the preset designs.
"""

import pytest

from voxbreed.activations        import ActivationKind
from voxbreed.genotype           import PRESETS, get_preset
from voxbreed.genotype.node_gene import INPUT_D, OUTPUT_R, NodeType
from voxbreed.phenotype          import evaluate


class TestPresets:
    """Test the preset catalogue."""

    def test_names(self):
        assert [p.name for p in PRESETS] == ["Nebula", "Waves", "Mandala", "Crystal", "Flame", "Cells"]

    @pytest.mark.parametrize("preset", PRESETS, ids=lambda p: p.name)
    def test_every_preset_builds_valid_genome(self, preset):
        genome = preset.build()
        genome.validate()
        assert list(genome.conn_genes) == [1000 + i for i in range(len(preset.wiring))]
        assert all(conn.enabled for conn in genome.conn_genes.values())
        assert all(node.bias == 0.0 for node in genome.node_genes.values())

    @pytest.mark.parametrize("preset", PRESETS, ids=lambda p: p.name)
    def test_every_preset_evaluates(self, preset):
        output = evaluate(preset.build(), 0.3, -0.4, 0.0)
        for channel in (output.r, output.g, output.b):
            assert 0.0 <= channel <= 1.0

    def test_nebula(self):
        genome = get_preset("Nebula")
        assert {n.id: n.activation for n in genome.hidden_nodes} == {9 : ActivationKind.GAUSSIAN,
                                                                     10: ActivationKind.SIN,
                                                                     11: ActivationKind.COS}
        first, last = genome.conn_genes[1000], genome.conn_genes[1009]
        assert (first.node_in, first.node_out, first.weight) == (INPUT_D, 9, 3.0)
        assert (last.node_in, last.node_out, last.weight) == (INPUT_D, OUTPUT_R, -1.2)

    def test_lookup_is_case_insensitive(self):
        assert len(get_preset("mandala").hidden_nodes) == 4
        assert get_preset("CELLS").node_genes[9].type == NodeType.HIDDEN

    def test_each_build_is_a_new_genome(self):
        a, b = get_preset("Waves"), get_preset("Waves")
        assert a.id != b.id
        assert a.to_dict() == b.to_dict()

    def test_unknown_preset(self):
        with pytest.raises(KeyError):
            get_preset("Galaxy")
