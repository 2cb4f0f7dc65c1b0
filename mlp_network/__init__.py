"""
mlp_network
~~~~~~~~~~~

Forward inference of a small fully-connected network that recognises
handwritten digits in 28x28 grayscale images.
"""

from .Matrix import Matrix
from .MlpNetwork import Digit, MlpNetwork
from .topology import DEFAULT_TOPOLOGY, MLP_SIZE, MatrixDims, Topology
from .layers import Activation, ActivationType, Dense, Layer
from .errors import (
    DimensionMismatchError,
    IndexOutOfRangeError,
    InvalidInputShapeError,
    InvalidShapeError,
    InvalidTopologyError,
    MalformedInputError,
    MlpError,
    NonFiniteOutputError,
    NotAVectorError,
    ParameterFileError,
)

__version__ = "1.0.0"

__all__ = [
    "Matrix",
    "Digit",
    "MlpNetwork",
    "DEFAULT_TOPOLOGY",
    "MLP_SIZE",
    "MatrixDims",
    "Topology",
    "Activation",
    "ActivationType",
    "Dense",
    "Layer",
    "DimensionMismatchError",
    "IndexOutOfRangeError",
    "InvalidInputShapeError",
    "InvalidShapeError",
    "InvalidTopologyError",
    "MalformedInputError",
    "MlpError",
    "NonFiniteOutputError",
    "NotAVectorError",
    "ParameterFileError",
]
