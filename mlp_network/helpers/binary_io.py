"""
binary_io.py
~~~~~~~~~~~~

Reading and writing matrices as raw binary files (little-endian float32,
row-major, nothing else in the file). Parameter files hold one weights or
bias matrix each, image files one 28x28 image.
"""

import csv
import logging
import os
from typing import Iterator, List, Sequence, Tuple

from ..Matrix import FILE_DTYPE, Matrix
from ..errors import MalformedInputError, ParameterFileError
from ..topology import DEFAULT_TOPOLOGY, Topology

logger = logging.getLogger(__name__)

LABELS_FILE = "labels.csv"


def read_file_to_matrix(path: str, matrix: Matrix) -> Matrix:
    """
    Reads a binary file into a pre-sized matrix.

    The file size has to match the matrix exactly. Raises MalformedInputError
    otherwise; a missing or unreadable file raises the usual OSError.
    """
    expected = matrix.rows * matrix.cols * FILE_DTYPE.itemsize
    actual = os.path.getsize(path)
    if actual != expected:
        raise MalformedInputError(
            f"{path}: expected {expected} bytes for a {matrix.rows}x{matrix.cols} "
            f"matrix, file has {actual}"
        )
    with open(path, "rb") as f:
        matrix.read(f)
    return matrix


def save_matrix(path: str, matrix: Matrix) -> None:
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    with open(path, "wb") as f:
        matrix.write(f)


def load_parameters(
    weight_paths: Sequence[str],
    bias_paths: Sequence[str],
    topology: Topology = DEFAULT_TOPOLOGY,
) -> Tuple[List[Matrix], List[Matrix]]:
    """
    Loads every layer's weights and bias into matrices shaped by the topology.

    Raises ParameterFileError naming the first layer (1-based) whose weights
    or bias file is missing, unreadable or of the wrong size.
    """
    if len(weight_paths) != topology.depth or len(bias_paths) != topology.depth:
        raise ValueError(
            f"Expected {topology.depth} weights and {topology.depth} bias paths, "
            f"got {len(weight_paths)} and {len(bias_paths)}"
        )

    weights, biases = [], []
    for i in range(topology.depth):
        w = Matrix(*topology.weights_dims[i])
        b = Matrix(*topology.bias_dims[i])
        try:
            read_file_to_matrix(weight_paths[i], w)
            read_file_to_matrix(bias_paths[i], b)
        except (OSError, MalformedInputError) as e:
            logger.error("Failed to load parameters for layer %d: %s", i + 1, e)
            raise ParameterFileError(i + 1) from e
        weights.append(w)
        biases.append(b)

    logger.info("Loaded parameters for %d layers", topology.depth)
    return weights, biases


def load_image(path: str, topology: Topology = DEFAULT_TOPOLOGY) -> Matrix:
    return read_file_to_matrix(path, Matrix(*topology.image_dims))


def load_labelled_samples(
    directory: str, topology: Topology = DEFAULT_TOPOLOGY
) -> Iterator[Tuple[str, Matrix, int]]:
    """
    Yields (path, image, label) for every row of <directory>/labels.csv.

    labels.csv has a 'filename,label' header; filenames are relative to the
    directory.
    """
    labels_path = os.path.join(directory, LABELS_FILE)
    with open(labels_path, newline="") as f:
        reader = csv.DictReader(f)
        for row in reader:
            try:
                filename, label = row["filename"], int(row["label"])
            except (KeyError, TypeError, ValueError) as e:
                raise MalformedInputError(f"{labels_path}: bad row {row}") from e
            if not 0 <= label < topology.output_size:
                raise MalformedInputError(
                    f"{labels_path}: label {label} of {filename} is not in [0, {topology.output_size})"
                )
            path = os.path.join(directory, filename)
            yield path, load_image(path, topology), label
