from .Layer import Layer
from .Activation import Activation
from ..errors import DimensionMismatchError


class Dense(Layer):
    def __init__(self, weights, bias, act_type):
        # weights: (out_features, in_features)
        # bias: (out_features, 1)
        # both are kept by reference, the caller owns them
        if bias.cols != 1 or bias.rows != weights.rows:
            raise DimensionMismatchError(
                f"Bias of shape {bias.rows}x{bias.cols} does not fit weights of shape "
                f"{weights.rows}x{weights.cols}"
            )
        self._weights = weights
        self._bias = bias
        self._activation = Activation(act_type)

    @property
    def weights(self):
        return self._weights

    @property
    def bias(self):
        return self._bias

    @property
    def activation(self):
        return self._activation

    @property
    def in_features(self):
        return self._weights.cols

    @property
    def out_features(self):
        return self._weights.rows

    def forward(self, x):
        # x shape: (in_features, 1)
        # return: (out_features, 1)
        return self._activation(self._weights * x + self._bias)

    def params(self):
        return [self._weights, self._bias]

    def __repr__(self):
        return f"Dense({self.in_features} -> {self.out_features}, {self._activation.activation_type.name})"
