import logging
import os

import numpy as np

from .binary_io import save_matrix
from ..Matrix import Matrix
from ..topology import DEFAULT_TOPOLOGY

logger = logging.getLogger(__name__)


def he_initialized_parameters(topology=DEFAULT_TOPOLOGY, seed=None):
    """
    Random weights and zero biases for every layer of the topology.
    Not trained, only useful to exercise the pipeline end to end.
    """
    rng = np.random.default_rng(seed)
    # use float32 like the rest of the network
    dtype = np.float32

    weights, biases = [], []
    for w_dims, b_dims in zip(topology.weights_dims, topology.bias_dims):
        out_features, in_features = w_dims
        # He initialization (ReLU layers)
        w = (
            rng.standard_normal((out_features, in_features)).astype(dtype)
            * np.sqrt(2.0 / in_features)
        ).astype(dtype)
        weights.append(Matrix.from_numpy(w))
        biases.append(Matrix(*b_dims))
    return weights, biases


def parameter_paths(directory, depth):
    # w1..wN, b1..bN, the order the CLI expects them in
    weight_paths = [os.path.join(directory, f"w{i + 1}") for i in range(depth)]
    bias_paths = [os.path.join(directory, f"b{i + 1}") for i in range(depth)]
    return weight_paths, bias_paths


def write_parameters(directory, weights, biases):
    os.makedirs(directory, exist_ok=True)
    weight_paths, bias_paths = parameter_paths(directory, len(weights))
    for path, matrix in zip(weight_paths + bias_paths, list(weights) + list(biases)):
        save_matrix(path, matrix)
    logger.info("Wrote %d parameter files to %s", len(weight_paths) + len(bias_paths), directory)
    return weight_paths, bias_paths
