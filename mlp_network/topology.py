from typing import NamedTuple, Sequence

from .errors import InvalidTopologyError


class MatrixDims(NamedTuple):
    rows: int
    cols: int


class Topology:
    """
    Fixed shape of an MlpNetwork: the input image dims and, per layer, the
    weights dims (out, in). Bias dims are (out, 1) for every layer.
    """

    def __init__(self, image_dims: MatrixDims, weights_dims: Sequence[MatrixDims]):
        self.image_dims = MatrixDims(*image_dims)
        self.weights_dims = tuple(MatrixDims(*dims) for dims in weights_dims)
        self.bias_dims = tuple(MatrixDims(dims.rows, 1) for dims in self.weights_dims)
        self._check_chain()

    def _check_chain(self):
        if not self.weights_dims:
            raise InvalidTopologyError(None, "A topology needs at least one layer")
        # each layer consumes what the previous one produced
        expected_in = self.image_dims.rows * self.image_dims.cols
        for i, dims in enumerate(self.weights_dims):
            if dims.cols != expected_in:
                raise InvalidTopologyError(
                    i + 1, f"Layer {i + 1} expects {dims.cols} inputs but receives {expected_in}"
                )
            expected_in = dims.rows

    @property
    def depth(self):
        return len(self.weights_dims)

    @property
    def input_dims(self):
        # the image, flattened into a column
        return MatrixDims(self.image_dims.rows * self.image_dims.cols, 1)

    @property
    def output_size(self):
        return self.weights_dims[-1].rows

    def __repr__(self):
        layers = ", ".join(f"{d.rows}x{d.cols}" for d in self.weights_dims)
        return f"Topology(image={self.image_dims.rows}x{self.image_dims.cols}, layers=[{layers}])"


# 28x28 image -> 128 -> 64 -> 20 -> 10 digits
DEFAULT_TOPOLOGY = Topology(
    image_dims=MatrixDims(28, 28),
    weights_dims=[
        MatrixDims(128, 784),
        MatrixDims(64, 128),
        MatrixDims(20, 64),
        MatrixDims(10, 20),
    ],
)

MLP_SIZE = DEFAULT_TOPOLOGY.depth
