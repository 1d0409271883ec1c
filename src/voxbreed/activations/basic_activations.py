import numpy as np
import random
from enum import Enum

class ActivationKind(Enum):
    """
    The closed set of activation functions a CPPN node may use.
    """
    SIGMOID  = "sigmoid"
    SIN      = "sin"
    COS      = "cos"
    GAUSSIAN = "gaussian"
    LINEAR   = "linear"
    ABS      = "abs"

def sigmoid_activation(z):
    z = np.clip(z, -500, 500)   # to prevent overflow when calculating exp
    return 1.0 / (1.0 + np.exp(-z))

def sin_activation(z):
    return np.sin(z)

def cos_activation(z):
    return np.cos(z)

def gaussian_activation(z):
    # Clip input to avoid overflow when squaring; exp(-1e4) is already 0.0
    z_clipped = np.clip(z, -100, 100)
    return np.exp(-(z_clipped * z_clipped))

def linear_activation(z):
    return z

def abs_activation(z):
    return np.abs(z)

activations = {
    ActivationKind.SIGMOID : sigmoid_activation,
    ActivationKind.SIN     : sin_activation,
    ActivationKind.COS     : cos_activation,
    ActivationKind.GAUSSIAN: gaussian_activation,
    ActivationKind.LINEAR  : linear_activation,
    ActivationKind.ABS     : abs_activation
    }

# 3-letter identifiers for each activation function
activation_codes = {
    ActivationKind.SIGMOID : "SIG",
    ActivationKind.SIN     : "SIN",
    ActivationKind.COS     : "COS",
    ActivationKind.GAUSSIAN: "GAU",
    ActivationKind.LINEAR  : "LIN",
    ActivationKind.ABS     : "ABS"
    }

ALL_ACTIVATIONS = list(ActivationKind)

def activate(kind: ActivationKind, z):
    """
    Apply the activation function identified by 'kind' to 'z'.
    Works on python floats and on numpy arrays alike.
    """
    return activations[kind](z)

def random_activation() -> ActivationKind:
    """
    Pick an activation kind uniformly at random.
    """
    return random.choice(ALL_ACTIVATIONS)
