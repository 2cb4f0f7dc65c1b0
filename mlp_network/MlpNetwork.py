import logging
from typing import NamedTuple

import numpy as np

from .layers import ActivationType, Dense
from .topology import DEFAULT_TOPOLOGY
from .errors import InvalidInputShapeError, InvalidTopologyError, NonFiniteOutputError

logger = logging.getLogger(__name__)


class Digit(NamedTuple):
    # most likely digit and the probability the network gives it
    value: int
    probability: float


class MlpNetwork:
    """
    Multi-layer perceptron for digit recognition.

    Every layer but the last uses ReLU, the last one softmax, and layer i
    always uses weights[i] / biases[i]. The network never changes after
    construction, so one instance can serve concurrent infer() calls.
    """

    def __init__(self, weights, biases, topology=DEFAULT_TOPOLOGY):
        weights, biases = list(weights), list(biases)
        if len(weights) != topology.depth or len(biases) != topology.depth:
            raise InvalidTopologyError(
                None,
                f"Expected {topology.depth} weights and biases, "
                f"got {len(weights)} and {len(biases)}",
            )

        for i in range(topology.depth):
            if weights[i].shape != topology.weights_dims[i] or biases[i].shape != topology.bias_dims[i]:
                raise InvalidTopologyError(i + 1)

        self.topology = topology
        last = topology.depth - 1
        self.layers = [
            Dense(w, b, ActivationType.SOFTMAX if i == last else ActivationType.RELU)
            for i, (w, b) in enumerate(zip(weights, biases))
        ]
        logger.debug("Built MlpNetwork %r", topology)

    def forward(self, x):
        # x: (784, 1), returns the (10, 1) probability column
        if x.shape != self.topology.input_dims:
            raise InvalidInputShapeError(
                f"Expected input of shape {self.topology.input_dims.rows}x"
                f"{self.topology.input_dims.cols}, got {x.rows}x{x.cols}"
            )
        for layer in self.layers:
            x = layer(x)

        if not np.isfinite(x.to_numpy()).all():
            raise NonFiniteOutputError(
                "Network output is not finite, a layer overflowed float32 or its parameters are not finite"
            )
        return x

    def infer(self, x):
        probs = self.forward(x)

        # strict '>' keeps the lowest index on ties
        digit = Digit(0, probs[0])
        for i in range(1, probs.rows):
            if probs[i] > digit.probability:
                digit = Digit(i, probs[i])

        logger.debug("Predicted %d (p=%.4f)", digit.value, digit.probability)
        return digit

    __call__ = infer

    def predict_image(self, image):
        # image: (28, 28); the caller's matrix is left as it was
        if image.shape != self.topology.image_dims:
            raise InvalidInputShapeError(
                f"Expected an image of shape {self.topology.image_dims.rows}x"
                f"{self.topology.image_dims.cols}, got {image.rows}x{image.cols}"
            )
        return self.infer(image.copy().vectorize())

    def parameters(self):
        ps = []
        for layer in self.layers:
            ps.extend(layer.params())
        return ps
