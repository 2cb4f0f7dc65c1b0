from enum import Enum

import numpy as np

from .Layer import Layer
from ..Matrix import Matrix
from ..errors import NotAVectorError

ERROR_NOT_VECTOR = "Error: Can only activate Vector, not Matrix."


class ActivationType(Enum):
    RELU = "relu"
    SOFTMAX = "softmax"


def _relu(x):
    # x shape: (rows,), returns max(0, x) elementwise
    return np.maximum(0.0, x)


def _softmax(x):
    # every exponential first, then one normalisation by the full sum.
    # shifting by the max keeps exp() finite and cancels out in the ratio
    exp_x = np.exp(x - np.max(x))
    total = np.sum(exp_x)
    return exp_x * (1.0 / total)


_ACTIVATIONS = {
    ActivationType.RELU: _relu,
    ActivationType.SOFTMAX: _softmax,
}


class Activation(Layer):
    def __init__(self, act_type):
        self._type = ActivationType(act_type)
        self._activate = _ACTIVATIONS[self._type]

    @property
    def activation_type(self):
        return self._type

    def forward(self, x):
        # x: (rows, 1) column, never modified
        if x.cols != 1:
            raise NotAVectorError(f"{ERROR_NOT_VECTOR} (got {x.rows}x{x.cols})")
        values = x.to_numpy().reshape(-1)
        return Matrix.from_numpy(self._activate(values))

    def __repr__(self):
        return f"Activation({self._type.name})"
