from .binary_io import (
    load_image,
    load_labelled_samples,
    load_parameters,
    read_file_to_matrix,
    save_matrix,
)
from .initializers import he_initialized_parameters, parameter_paths, write_parameters

__all__ = [
    "load_image",
    "load_labelled_samples",
    "load_parameters",
    "read_file_to_matrix",
    "save_matrix",
    "he_initialized_parameters",
    "parameter_paths",
    "write_parameters",
]
