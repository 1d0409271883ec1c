"""
Phenotype Package

This package expresses CPPN genomes as evaluators.

Exported:
    NetworkBase:     Abstract base class of the evaluators
    NetworkStandard: Point evaluator
    NetworkFast:     Batched numpy evaluator
    CPPNOutput:      Output of the point evaluator
    BatchOutput:     Output of the batched evaluator
    evaluate:        Evaluate a genome at one point
"""

from voxbreed.phenotype.network_base     import NetworkBase
from voxbreed.phenotype.network_standard import NetworkStandard, CPPNOutput, evaluate
from voxbreed.phenotype.network_fast     import NetworkFast, BatchOutput

__all__ = [
    'NetworkBase',
    'NetworkStandard',
    'NetworkFast',
    'CPPNOutput',
    'BatchOutput',
    'evaluate'
]
