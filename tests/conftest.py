"""
conftest.py
~~~~~~~~~~~

Shared fixtures for the test suite.
"""

import matplotlib
matplotlib.use("Agg")

import numpy as np
import pytest

from mlp_network import DEFAULT_TOPOLOGY, Matrix, MlpNetwork
from mlp_network.helpers import he_initialized_parameters, save_matrix, write_parameters


@pytest.fixture
def zero_parameters():
    """All-zero weights and biases shaped like the default topology."""
    weights = [Matrix(*dims) for dims in DEFAULT_TOPOLOGY.weights_dims]
    biases = [Matrix(*dims) for dims in DEFAULT_TOPOLOGY.bias_dims]
    return weights, biases


@pytest.fixture
def zero_network(zero_parameters):
    return MlpNetwork(*zero_parameters)


@pytest.fixture
def random_parameters():
    return he_initialized_parameters(DEFAULT_TOPOLOGY, seed=1234)


@pytest.fixture
def parameter_files(tmp_path, random_parameters):
    """Random parameters written to w1..w4, b1..b4; returns (weight_paths, bias_paths)."""
    return write_parameters(str(tmp_path / "params"), *random_parameters)


@pytest.fixture
def image_file(tmp_path):
    """A 28x28 image with a bright vertical bar, saved in the raw format."""
    pixels = np.zeros((28, 28), dtype=np.float32)
    pixels[4:24, 13:15] = 1.0
    path = str(tmp_path / "one.bin")
    save_matrix(path, Matrix.from_numpy(pixels))
    return path
