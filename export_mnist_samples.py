"""
export_mnist_samples.py
~~~~~~~~~~~~~~~~~~~~~~~

Writes MNIST test digits as raw float32 image files (the format
mlp_predictions.py reads) plus a labels.csv, so the CLI can be tried and
evaluated on real data.

Usage:
    python export_mnist_samples.py samples/ --count 100
    python export_mnist_samples.py samples/ --random-weights params/
"""

import argparse
import csv
import os

import numpy as np
from tensorflow import keras

from mlp_network import DEFAULT_TOPOLOGY, Matrix
from mlp_network.helpers import he_initialized_parameters, save_matrix, write_parameters


def load_mnist_test_keras():
    (_, _), (x_test, y_test) = keras.datasets.mnist.load_data()  # x: (N,28,28), uint8
    # normalize to [0,1]
    return x_test.astype(np.float32) / 255.0, y_test


def export_samples(images, labels, directory, count):
    os.makedirs(directory, exist_ok=True)
    rows = []
    for i, (image, label) in enumerate(zip(images[:count], labels[:count])):
        filename = f"digit_{i:05d}_{int(label)}.bin"
        save_matrix(os.path.join(directory, filename), Matrix.from_numpy(image))
        rows.append((filename, int(label)))

    with open(os.path.join(directory, "labels.csv"), "w", newline="") as f:
        w = csv.writer(f)
        w.writerow(["filename", "label"])
        w.writerows(rows)
    return rows


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__.split("\n\n")[1])
    parser.add_argument("directory")
    parser.add_argument("--count", type=int, default=100)
    parser.add_argument("--random-weights", metavar="DIR",
                        help="also write untrained He-initialised parameter files to DIR")
    parser.add_argument("--seed", type=int, default=0)
    args = parser.parse_args()

    x_test, y_test = load_mnist_test_keras()
    rows = export_samples(x_test, y_test, args.directory, args.count)
    print(f"Exported {len(rows)} digits to {args.directory}")

    if args.random_weights:
        weights, biases = he_initialized_parameters(DEFAULT_TOPOLOGY, seed=args.seed)
        weight_paths, bias_paths = write_parameters(args.random_weights, weights, biases)
        print("Parameter files:", " ".join(weight_paths + bias_paths))
