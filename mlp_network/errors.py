class MlpError(Exception):
    """Base class for every error raised by the network core."""


class InvalidShapeError(MlpError, ValueError):
    # non-positive (or non-integer) dimensions at construction
    pass


class DimensionMismatchError(MlpError, ValueError):
    # incompatible operands in multiply / add
    pass


class IndexOutOfRangeError(MlpError, IndexError):
    pass


class NotAVectorError(MlpError, ValueError):
    # activation applied to something that is not a column
    pass


class MalformedInputError(MlpError, ValueError):
    # stream too short, too long or not float data
    pass


class ParameterFileError(MalformedInputError):
    def __init__(self, layer, message=None):
        self.layer = layer
        super().__init__(message or f"Error: invalid Parameters file for layer: {layer}")


class InvalidTopologyError(MlpError, ValueError):
    def __init__(self, layer, message=None):
        # layer is 1-based, None when the layer count itself is wrong
        self.layer = layer
        if message is None:
            message = (
                "Error: You have given MlpNetwork matrices with improper dimensions"
                + (f" (layer {layer})" if layer is not None else "")
            )
        super().__init__(message)


class InvalidInputShapeError(MlpError, ValueError):
    pass


class NonFiniteOutputError(MlpError, ArithmeticError):
    # the forward pass overflowed, so the probabilities are NaN / inf
    pass
