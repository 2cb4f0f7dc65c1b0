"""
test_layers.py
~~~~~~~~~~~~~~

Unit tests for the activation functions and the Dense layer.
"""

import numpy as np
import pytest

from mlp_network import (
    Activation,
    ActivationType,
    Dense,
    DimensionMismatchError,
    Matrix,
    NotAVectorError,
)


def _identity(n):
    return Matrix.from_numpy(np.eye(n))


@pytest.mark.unit
class TestActivation:
    """Test ReLU and softmax."""

    def test_relu(self):
        out = Activation(ActivationType.RELU)(Matrix.from_numpy([-1.0, 0.0, 2.0]))
        assert out == Matrix.from_numpy([0.0, 0.0, 2.0])

    def test_relu_does_not_mutate_input(self):
        x = Matrix.from_numpy([-1.0, 3.0])
        Activation(ActivationType.RELU)(x)
        assert x == Matrix.from_numpy([-1.0, 3.0])

    def test_softmax_uniform(self):
        out = Activation(ActivationType.SOFTMAX)(Matrix(3, 1))
        assert out.shape == (3, 1)
        for i in range(3):
            assert out[i] == pytest.approx(1 / 3, rel=1e-6)

    def test_softmax_matches_definition(self):
        values = np.array([1.0, 2.0, 3.0, -4.0])
        out = Activation(ActivationType.SOFTMAX)(Matrix.from_numpy(values))
        expected = np.exp(values) / np.exp(values).sum()
        assert np.allclose(out.to_numpy().ravel(), expected, atol=1e-6)

    @pytest.mark.parametrize("values", [
        [0.0],
        [1.0, -1.0, 0.5, 10.0],
        [-50.0, -60.0, -70.0],
        [100.0, 200.0, 300.0],
    ])
    def test_softmax_sums_to_one(self, values):
        out = Activation(ActivationType.SOFTMAX)(Matrix.from_numpy(values))
        assert float(out.to_numpy().sum()) == pytest.approx(1.0, abs=1e-5)
        assert np.all(out.to_numpy() >= 0.0)

    @pytest.mark.parametrize("act_type", list(ActivationType))
    def test_rejects_non_vector(self, act_type):
        with pytest.raises(NotAVectorError):
            Activation(act_type)(Matrix(2, 2))

    def test_type_from_string(self):
        assert Activation("softmax").activation_type is ActivationType.SOFTMAX

    def test_unknown_type(self):
        with pytest.raises(ValueError):
            Activation("tanh")


@pytest.mark.unit
class TestDense:
    """Test the affine transform + activation layer."""

    def test_identity_relu_passes_through(self):
        """Test that identity weights and zero bias give relu(input)."""
        x = Matrix.from_numpy([-2.0, 0.5, 3.0, -0.1])
        layer = Dense(_identity(4), Matrix(4, 1), ActivationType.RELU)
        assert layer(x) == Activation(ActivationType.RELU)(x)

    def test_affine_then_activation(self):
        w = Matrix.from_numpy([[1.0, 2.0], [-1.0, -1.0], [0.0, 1.0]])
        b = Matrix.from_numpy([0.5, 0.0, -3.0])
        x = Matrix.from_numpy([1.0, 1.0])
        # w*x + b = [3.5, -2, -2] -> relu
        assert Dense(w, b, ActivationType.RELU)(x) == Matrix.from_numpy([3.5, 0.0, 0.0])

    def test_forward_leaves_input_and_params_untouched(self):
        w, b = _identity(2), Matrix.from_numpy([1.0, 1.0])
        x = Matrix.from_numpy([-5.0, 5.0])
        Dense(w, b, ActivationType.SOFTMAX).forward(x)
        assert x == Matrix.from_numpy([-5.0, 5.0])
        assert w == _identity(2)
        assert b == Matrix.from_numpy([1.0, 1.0])

    def test_keeps_references(self):
        w, b = _identity(3), Matrix(3, 1)
        layer = Dense(w, b, ActivationType.RELU)
        assert layer.weights is w
        assert layer.bias is b
        assert layer.params() == [w, b]
        assert layer.activation.activation_type is ActivationType.RELU

    def test_input_size_mismatch(self):
        layer = Dense(Matrix(3, 4), Matrix(3, 1), ActivationType.RELU)
        with pytest.raises(DimensionMismatchError):
            layer(Matrix(3, 1))

    @pytest.mark.parametrize("bias_shape", [(2, 1), (3, 2)])
    def test_bias_must_fit_weights(self, bias_shape):
        with pytest.raises(DimensionMismatchError):
            Dense(Matrix(3, 4), Matrix(*bias_shape), ActivationType.RELU)
