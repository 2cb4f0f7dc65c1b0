import io
import logging
import numbers
import operator

import numpy as np

from .errors import (
    DimensionMismatchError,
    IndexOutOfRangeError,
    InvalidShapeError,
    MalformedInputError,
)

logger = logging.getLogger(__name__)

# element type in memory and on disk (little-endian IEEE-754 single)
DTYPE = np.float32
FILE_DTYPE = np.dtype("<f4")

NO_PIXEL = "  "
YES_PIXEL = "**"
PRINT_THRESHOLD = 0.1

ERROR_BAD_MATRIX_INPUT = "Error: Invalid Matrix input."
ERROR_MATRIX_DIMS = "Error: Can't use operation on two Matrices with incompatible dimensions."
ERROR_BAD_MATRIX_INDEX = "Error: Invalid index to access matrix."


class _Dense2D:
    # data shape: (rows, cols), row-major
    def __init__(self, data):
        self.data = data

    def get(self, i, j):
        return self.data[i, j]

    def set(self, i, j, value):
        self.data[i, j] = value

    def as_2d(self):
        return self.data

    def copy(self):
        return _Dense2D(self.data.copy())


class _Column:
    # data shape: (rows,), used whenever cols == 1
    def __init__(self, data):
        self.data = data

    def get(self, i, j):
        return self.data[i]

    def set(self, i, j, value):
        self.data[i] = value

    def as_2d(self):
        return self.data.reshape(-1, 1)

    def copy(self):
        return _Column(self.data.copy())


def _make_storage(rows, cols, data=None):
    if data is None:
        data = np.zeros((rows, cols), dtype=DTYPE)
    if cols == 1:
        return _Column(np.ascontiguousarray(data, dtype=DTYPE).reshape(rows))
    return _Dense2D(np.ascontiguousarray(data, dtype=DTYPE).reshape(rows, cols))


def _check_dims(rows, cols):
    for dim in (rows, cols):
        if isinstance(dim, bool) or not isinstance(dim, (int, np.integer)) or dim <= 0:
            raise InvalidShapeError(f"{ERROR_BAD_MATRIX_INPUT} Bad dimensions ({rows}, {cols})")


class Matrix:
    """
    A rows x cols float buffer.

    Storage is a dense 2-D array, or a flat 1-D array when the matrix is a
    column (cols == 1). Both forms index the same way, and every operation
    returns a result whose form follows that rule.
    """

    def __init__(self, rows=1, cols=1):
        _check_dims(rows, cols)
        self._rows = int(rows)
        self._cols = int(cols)
        self._storage = _make_storage(self._rows, self._cols)

    @classmethod
    def _wrap(cls, rows, cols, storage):
        matrix = cls.__new__(cls)
        matrix._rows = rows
        matrix._cols = cols
        matrix._storage = storage
        return matrix

    @classmethod
    def from_numpy(cls, array):
        """Builds a Matrix from a 1-D (column) or 2-D array-like. The data is copied."""
        array = np.asarray(array, dtype=DTYPE)
        if array.ndim == 1:
            rows, cols = array.shape[0], 1
        elif array.ndim == 2:
            rows, cols = array.shape
        else:
            raise InvalidShapeError(f"{ERROR_BAD_MATRIX_INPUT} Expected 1-D or 2-D data, got {array.shape}")
        _check_dims(rows, cols)
        return cls._wrap(rows, cols, _make_storage(rows, cols, array.copy()))

    @classmethod
    def from_bytes(cls, rows, cols, data):
        matrix = cls(rows, cols)
        matrix.read(io.BytesIO(data))
        return matrix

    def to_numpy(self):
        # always (rows, cols), never a view on our storage
        return self._storage.as_2d().copy()

    # ----- shape -----
    @property
    def rows(self):
        return self._rows

    @property
    def cols(self):
        return self._cols

    @property
    def shape(self):
        return self._rows, self._cols

    @property
    def is_vector(self):
        return isinstance(self._storage, _Column)

    def vectorize(self):
        """
        Flattens the matrix row by row into a (rows*cols, 1) column, in place.
        Returns self so calls chain: img.vectorize() + bias.
        A matrix that is already a column is returned unchanged.
        """
        if isinstance(self._storage, _Dense2D):
            self._storage = _Column(self._storage.data.flatten(order="C"))
            self._rows, self._cols = self._rows * self._cols, 1
        return self

    reshape_to_column = vectorize

    # ----- copying -----
    def copy(self):
        return Matrix._wrap(self._rows, self._cols, self._storage.copy())

    def __copy__(self):
        return self.copy()

    def __deepcopy__(self, memo):
        return self.copy()

    # ----- element access -----
    def _locate(self, key):
        if isinstance(key, tuple):
            if len(key) != 2:
                raise TypeError(f"Matrix indices must be (row, col) or a single int, got {key!r}")
            i, j = operator.index(key[0]), operator.index(key[1])
        else:
            # linear, row-major
            i, j = divmod(operator.index(key), self._cols)
        if not (0 <= i < self._rows and 0 <= j < self._cols):
            raise IndexOutOfRangeError(
                f"{ERROR_BAD_MATRIX_INDEX} ({key!r} for shape {self._rows}x{self._cols})"
            )
        return i, j

    def __getitem__(self, key):
        i, j = self._locate(key)
        return float(self._storage.get(i, j))

    def __setitem__(self, key, value):
        i, j = self._locate(key)
        self._storage.set(i, j, value)

    # ----- arithmetic -----
    def _matmul(self, other):
        if self._cols != other._rows:
            raise DimensionMismatchError(
                f"{ERROR_MATRIX_DIMS} ({self._rows}x{self._cols} * {other._rows}x{other._cols})"
            )
        a, b = self._storage, other._storage

        if isinstance(a, _Column):
            if isinstance(b, _Column):
                # column * 1x1
                storage = _Column(a.data * b.data[0])
            else:
                # column * single row
                storage = _Dense2D(np.outer(a.data, b.data[0]).astype(DTYPE, copy=False))
        elif isinstance(b, _Column):
            storage = _Column((a.data @ b.data).astype(DTYPE, copy=False))
        else:
            storage = _Dense2D((a.data @ b.data).astype(DTYPE, copy=False))

        return Matrix._wrap(self._rows, other._cols, storage)

    def _scale(self, scalar):
        try:
            factor = DTYPE(scalar)
        except OverflowError:
            # ints (or fractions) too large for a float saturate like float32 does
            factor = DTYPE(np.inf if scalar > 0 else -np.inf)
        storage = self._storage.copy()
        storage.data *= factor
        return Matrix._wrap(self._rows, self._cols, storage)

    def __mul__(self, other):
        if isinstance(other, Matrix):
            return self._matmul(other)
        if isinstance(other, numbers.Real):
            return self._scale(other)
        return NotImplemented

    def __rmul__(self, other):
        if isinstance(other, numbers.Real):
            return self._scale(other)
        return NotImplemented

    def __matmul__(self, other):
        if isinstance(other, Matrix):
            return self._matmul(other)
        return NotImplemented

    def _check_same_shape(self, other):
        if self.shape != other.shape:
            raise DimensionMismatchError(
                f"{ERROR_MATRIX_DIMS} ({self._rows}x{self._cols} + {other._rows}x{other._cols})"
            )

    def __iadd__(self, other):
        if not isinstance(other, Matrix):
            return NotImplemented
        self._check_same_shape(other)
        self._storage.data += other._storage.data
        return self

    def __add__(self, other):
        if not isinstance(other, Matrix):
            return NotImplemented
        self._check_same_shape(other)
        result = self.copy()
        result += other
        return result

    def __eq__(self, other):
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.shape == other.shape and np.array_equal(
            self._storage.as_2d(), other._storage.as_2d()
        )

    __hash__ = None

    # ----- binary I/O -----
    def read(self, stream):
        """
        Fills the matrix from a binary stream of little-endian float32, row-major.
        The stream has to hold exactly rows*cols values. On any error the
        matrix is left untouched.
        """
        n_bytes = self._rows * self._cols * FILE_DTYPE.itemsize
        raw = stream.read(n_bytes)
        if not isinstance(raw, (bytes, bytearray, memoryview)):
            raise MalformedInputError(f"{ERROR_BAD_MATRIX_INPUT} Expected binary data")
        if len(raw) != n_bytes:
            raise MalformedInputError(
                f"{ERROR_BAD_MATRIX_INPUT} Expected {n_bytes} bytes, got {len(raw)}"
            )
        if stream.read(1):
            raise MalformedInputError(f"{ERROR_BAD_MATRIX_INPUT} Trailing data after {n_bytes} bytes")

        values = np.frombuffer(raw, dtype=FILE_DTYPE).astype(DTYPE)
        if not np.isfinite(values).all():
            raise MalformedInputError(f"{ERROR_BAD_MATRIX_INPUT} Input contains NaN or infinite values")

        self._storage = _make_storage(self._rows, self._cols, values)
        logger.debug("Read %dx%d matrix (%d bytes)", self._rows, self._cols, n_bytes)
        return self

    def write(self, stream):
        stream.write(self._storage.as_2d().astype(FILE_DTYPE).tobytes(order="C"))

    # ----- printing -----
    def plain_str(self):
        # space after every element (incl. the last one), newline after every row
        return "".join(
            "".join(f"{value:g} " for value in row) + "\n"
            for row in self._storage.as_2d()
        )

    def plain_print(self):
        print(self.plain_str(), end="")

    def __str__(self):
        # compared in float32, so an element of exactly 0.1 stays light
        threshold = DTYPE(PRINT_THRESHOLD)
        return "".join(
            "".join(YES_PIXEL if value > threshold else NO_PIXEL for value in row) + "\n"
            for row in self._storage.as_2d()
        )

    def __repr__(self):
        form = "column" if self.is_vector else "dense"
        return f"Matrix(rows={self._rows}, cols={self._cols}, {form})"
