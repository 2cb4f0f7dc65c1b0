"""
test_mlp_network.py
~~~~~~~~~~~~~~~~~~~

Unit tests for the topology and the full network forward pass.
"""

from concurrent.futures import ThreadPoolExecutor

import numpy as np
import pytest

from mlp_network import (
    DEFAULT_TOPOLOGY,
    ActivationType,
    Digit,
    InvalidInputShapeError,
    InvalidTopologyError,
    Matrix,
    MatrixDims,
    MlpNetwork,
    NonFiniteOutputError,
    Topology,
)


def _reference_forward(weights, biases, x):
    """Plain NumPy forward pass used as an oracle."""
    a = x.to_numpy().astype(np.float64)
    for i, (w, b) in enumerate(zip(weights, biases)):
        z = w.to_numpy() @ a + b.to_numpy()
        if i < len(weights) - 1:
            a = np.maximum(0.0, z)
        else:
            e = np.exp(z - z.max())
            a = e / e.sum()
    return a.ravel()


def _random_input(seed=0):
    rng = np.random.default_rng(seed)
    return Matrix.from_numpy(rng.random(784))


@pytest.mark.unit
class TestTopology:
    """Test the topology configuration value."""

    def test_default_shapes(self):
        assert DEFAULT_TOPOLOGY.depth == 4
        assert DEFAULT_TOPOLOGY.image_dims == (28, 28)
        assert DEFAULT_TOPOLOGY.input_dims == (784, 1)
        assert DEFAULT_TOPOLOGY.weights_dims == ((128, 784), (64, 128), (20, 64), (10, 20))
        assert DEFAULT_TOPOLOGY.bias_dims == ((128, 1), (64, 1), (20, 1), (10, 1))
        assert DEFAULT_TOPOLOGY.output_size == 10

    def test_layers_must_chain(self):
        with pytest.raises(InvalidTopologyError) as exc_info:
            Topology(MatrixDims(2, 2), [MatrixDims(3, 4), MatrixDims(2, 5)])
        assert exc_info.value.layer == 2

    def test_needs_a_layer(self):
        with pytest.raises(InvalidTopologyError):
            Topology(MatrixDims(2, 2), [])


@pytest.mark.unit
class TestConstruction:
    """Test shape validation when building the network."""

    def test_builds_four_layers(self, zero_parameters):
        weights, biases = zero_parameters
        net = MlpNetwork(weights, biases)
        assert len(net.layers) == 4
        types = [layer.activation.activation_type for layer in net.layers]
        assert types == [ActivationType.RELU] * 3 + [ActivationType.SOFTMAX]

    def test_each_layer_uses_its_own_parameters(self, zero_parameters):
        weights, biases = zero_parameters
        net = MlpNetwork(weights, biases)
        for i, layer in enumerate(net.layers):
            assert layer.weights is weights[i]
            assert layer.bias is biases[i]
        assert net.parameters() == [p for pair in zip(weights, biases) for p in pair]

    @pytest.mark.parametrize("layer", range(4))
    def test_wrong_weights_shape_names_layer(self, zero_parameters, layer):
        weights, biases = zero_parameters
        rows, cols = DEFAULT_TOPOLOGY.weights_dims[layer]
        weights[layer] = Matrix(rows, cols + 1)
        with pytest.raises(InvalidTopologyError) as exc_info:
            MlpNetwork(weights, biases)
        assert exc_info.value.layer == layer + 1

    @pytest.mark.parametrize("layer", range(4))
    def test_wrong_bias_shape_names_layer(self, zero_parameters, layer):
        weights, biases = zero_parameters
        rows = DEFAULT_TOPOLOGY.bias_dims[layer].rows
        biases[layer] = Matrix(rows + 1, 1)
        with pytest.raises(InvalidTopologyError) as exc_info:
            MlpNetwork(weights, biases)
        assert exc_info.value.layer == layer + 1

    def test_first_mismatch_reported(self, zero_parameters):
        weights, biases = zero_parameters
        weights[1] = Matrix(2, 2)
        weights[3] = Matrix(2, 2)
        with pytest.raises(InvalidTopologyError) as exc_info:
            MlpNetwork(weights, biases)
        assert exc_info.value.layer == 2

    def test_wrong_layer_count(self, zero_parameters):
        weights, biases = zero_parameters
        with pytest.raises(InvalidTopologyError) as exc_info:
            MlpNetwork(weights[:3], biases[:3])
        assert exc_info.value.layer is None

    def test_custom_topology(self):
        topology = Topology(MatrixDims(2, 2), [MatrixDims(3, 4), MatrixDims(2, 3)])
        weights = [Matrix(3, 4), Matrix(2, 3)]
        biases = [Matrix(3, 1), Matrix.from_numpy([0.0, 1.0])]
        net = MlpNetwork(weights, biases, topology)
        assert net.infer(Matrix(4, 1)).value == 1


@pytest.mark.unit
class TestInference:
    """Test infer(), forward() and predict_image()."""

    def test_all_zero_network_is_uniform(self, zero_network):
        digit = zero_network.infer(Matrix(784, 1))
        assert isinstance(digit, Digit)
        assert digit.value == 0
        assert digit.probability == pytest.approx(0.1, rel=1e-6)

    def test_ties_go_to_lowest_index(self, zero_parameters):
        weights, biases = zero_parameters
        biases[3][3] = 5.0
        biases[3][7] = 5.0
        net = MlpNetwork(weights, biases)
        digit = net(Matrix(784, 1))
        assert digit.value == 3

    def test_infinite_parameter_raises(self, zero_parameters):
        """Test that NaN probabilities are reported instead of returned as a Digit."""
        weights, biases = zero_parameters
        biases[3][5] = np.inf
        net = MlpNetwork(weights, biases)
        with pytest.raises(NonFiniteOutputError):
            net.infer(Matrix(784, 1))

    def test_float32_overflow_raises(self, zero_parameters):
        weights, biases = zero_parameters
        weights[0] = Matrix.from_numpy(np.full((128, 784), 3e38, dtype=np.float32))
        net = MlpNetwork(weights, biases)
        image = Matrix.from_numpy(np.ones((784, 1), dtype=np.float32))
        with pytest.raises(NonFiniteOutputError):
            net.infer(image)

    def test_last_layer_bias_decides(self, zero_parameters):
        weights, biases = zero_parameters
        biases[3][8] = 2.0
        digit = MlpNetwork(weights, biases).infer(Matrix(784, 1))
        assert digit.value == 8
        expected = np.exp(2.0) / (9 + np.exp(2.0))
        assert digit.probability == pytest.approx(expected, rel=1e-5)

    def test_output_is_probability_column(self, random_parameters):
        net = MlpNetwork(*random_parameters)
        probs = net.forward(_random_input())
        assert probs.shape == (10, 1)
        assert float(probs.to_numpy().sum()) == pytest.approx(1.0, abs=1e-5)

    def test_matches_reference_forward(self, random_parameters):
        weights, biases = random_parameters
        net = MlpNetwork(weights, biases)
        x = _random_input(3)

        expected = _reference_forward(weights, biases, x)
        probs = net.forward(x).to_numpy().ravel()
        assert np.allclose(probs, expected, atol=1e-5)

        digit = net.infer(x)
        assert digit.value == int(np.argmax(expected))
        assert digit.probability == pytest.approx(float(expected.max()), abs=1e-5)

    @pytest.mark.parametrize("shape", [(28, 28), (784, 2), (783, 1), (1, 784)])
    def test_wrong_input_shape(self, zero_network, shape):
        with pytest.raises(InvalidInputShapeError):
            zero_network.infer(Matrix(*shape))

    def test_predict_image_keeps_caller_image(self, random_parameters):
        net = MlpNetwork(*random_parameters)
        pixels = np.random.default_rng(5).random((28, 28))
        image = Matrix.from_numpy(pixels)

        digit = net.predict_image(image)

        assert image.shape == (28, 28)
        assert image == Matrix.from_numpy(pixels)
        assert digit == net.infer(Matrix.from_numpy(pixels).vectorize())

    def test_predict_image_wrong_shape(self, zero_network):
        with pytest.raises(InvalidInputShapeError):
            zero_network.predict_image(Matrix(784, 1))

    def test_repeated_and_concurrent_inference(self, random_parameters):
        """Test that one network serves many threads with identical results."""
        net = MlpNetwork(*random_parameters)
        inputs = [_random_input(seed) for seed in range(16)]
        sequential = [net.infer(x) for x in inputs]

        with ThreadPoolExecutor(max_workers=4) as pool:
            concurrent = list(pool.map(net.infer, inputs))

        assert concurrent == sequential
        assert [net.infer(x) for x in inputs] == sequential
