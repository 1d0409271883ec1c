"""
Activations Package

This package provides the activation functions used by CPPN nodes.
Each function maps R -> R and accepts python floats as well as numpy arrays.

Exported:
    ActivationKind:    Enumeration of the six activation kinds
    activations:       Dictionary mapping activation kinds to functions
    activation_codes:  Dictionary mapping activation kinds to 3-letter codes
    ALL_ACTIVATIONS:   List of all activation kinds
    activate:          Apply an activation kind to a value
    random_activation: Pick an activation kind uniformly at random
    Individual activation functions: sigmoid_activation, sin_activation, cos_activation,
                                     gaussian_activation, linear_activation, abs_activation
"""

from voxbreed.activations.basic_activations import (
    ActivationKind,
    ALL_ACTIVATIONS,
    activate,
    activations,
    activation_codes,
    random_activation,
    sigmoid_activation,
    sin_activation,
    cos_activation,
    gaussian_activation,
    linear_activation,
    abs_activation
)

__all__ = [
    'ActivationKind',
    'ALL_ACTIVATIONS',
    'activate',
    'activations',
    'activation_codes',
    'random_activation',
    'sigmoid_activation',
    'sin_activation',
    'cos_activation',
    'gaussian_activation',
    'linear_activation',
    'abs_activation'
]
