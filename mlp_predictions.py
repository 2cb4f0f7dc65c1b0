"""
mlp_predictions.py
~~~~~~~~~~~~~~~~~~

Reads the network's weights and biases, then keeps asking for digit image
paths and prints the most likely digit with its probability. Enter 'q' to quit.

Usage:
    python mlp_predictions.py w1 w2 w3 w4 b1 b2 b3 b4
    python mlp_predictions.py w1 w2 w3 w4 b1 b2 b3 b4 --evaluate samples/
"""

import argparse
import logging
import os
import sys

from mlp_network import DEFAULT_TOPOLOGY, MLP_SIZE, MlpError, MlpNetwork, ParameterFileError
from mlp_network.helpers import load_image, load_labelled_samples, load_parameters
from mlp_network.helpers.evaluation import evaluate
from mlp_network.helpers.logger import RunLogger

QUIT = "q"
INSERT_IMAGE_PATH = "Please insert image path:"
ERROR_INVALID_PARAMETER = "Error: invalid Parameters file for layer: "
ERROR_INVALID_INPUT = "Error: Failed to retrieve input. Exiting.."
ERROR_INVALID_IMG = "Error: invalid image path or size: "
USAGE_MSG = (
    "Usage:\n"
    "\t./mlpnetwork w1 w2 w3 w4 b1 b2 b3 b4\n"
    "\twi - the i'th layer's weights\n"
    "\tbi - the i'th layer's biases"
)

logger = logging.getLogger("mlp_predictions")


def configure_logging(level=None):
    """
    Sets up logging from --log-level, else the LOG_LEVEL environment variable.
    Defaults to WARNING so the interactive output stays readable.
    """
    level_str = (level or os.getenv("LOG_LEVEL", "WARNING")).upper()
    log_level = getattr(logging, level_str, logging.WARNING)
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )
    # matplotlib is chatty at DEBUG
    logging.getLogger("matplotlib").setLevel(max(log_level, logging.INFO))


def build_parser():
    parser = argparse.ArgumentParser(
        description="Recognise handwritten digits with a fixed 4-layer MLP.",
    )
    parser.add_argument("params", nargs="*", help="w1 w2 w3 w4 b1 b2 b3 b4 parameter files")
    parser.add_argument("--evaluate", metavar="DIR",
                        help="evaluate on DIR/labels.csv instead of the interactive loop")
    parser.add_argument("--runs-dir", default=None,
                        help="record predictions (CSV/JSON/plots) under this directory")
    parser.add_argument("--plot", action="store_true",
                        help="save a prediction figure per image (implies --runs-dir runs)")
    parser.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING, ...")
    return parser


def _read_tokens(stream):
    # whitespace separated words, one line at a time
    for line in stream:
        yield from line.split()


def _process_image(mlp, img_path, img, run_logger=None, plot=False):
    try:
        output = mlp.predict_image(img)
    except MlpError as e:
        # e.g. float32 overflow inside the network, the session goes on
        logger.warning("Prediction failed for %s: %s", img_path, e)
        print(f"Error: {e}", file=sys.stderr)
        return

    print("Image processed:")
    print(img)
    print(f"Mlp result: {output.value} at probability: {output.probability:g}")

    if run_logger is not None:
        row = run_logger.log_prediction(img_path, output)
        if plot:
            probs = mlp.forward(img.copy().vectorize())
            run_logger.plot_prediction(img, probs, tag=str(row["index"]))


def mlp_cli(mlp, stdin=None, run_logger=None, plot=False):
    """
    Loops on: read an image path, feed it to the network, print image and prediction.
    Returns the process exit status.
    """
    tokens = _read_tokens(sys.stdin if stdin is None else stdin)

    print(INSERT_IMAGE_PATH)
    img_path = next(tokens, None)
    while img_path != QUIT:
        if img_path is None:
            print(ERROR_INVALID_INPUT)
            return 1

        try:
            img = load_image(img_path, mlp.topology)
        except (OSError, MlpError) as e:
            logger.info("Rejected image %s: %s", img_path, e)
            print(ERROR_INVALID_IMG + img_path)
        else:
            _process_image(mlp, img_path, img, run_logger, plot)

        print(INSERT_IMAGE_PATH)
        img_path = next(tokens, None)

    if run_logger is not None:
        run_logger.save_json()
    return 0


def run_evaluation(mlp, directory, run_logger, plot=False):
    try:
        metrics = evaluate(mlp, load_labelled_samples(directory, mlp.topology),
                           run_logger=run_logger, plot=plot)
    except (OSError, MlpError) as e:
        print(f"Error: evaluation failed: {e}", file=sys.stderr)
        return 1

    print(f"Samples: {len(run_logger.records)}")
    print(f"Accuracy: {metrics['accuracy']:.4f}")
    print(f"Macro F1: {metrics['macro_f1']:.4f}")
    print("Confusion matrix:\n", metrics["confusion_matrix"])
    print(f"Run saved to: {run_logger.dir}")
    return 0


def main(argv=None, stdin=None):
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    if len(args.params) != MLP_SIZE * 2:
        print(USAGE_MSG)
        return 1

    weight_paths, bias_paths = args.params[:MLP_SIZE], args.params[MLP_SIZE:]
    try:
        weights, biases = load_parameters(weight_paths, bias_paths, DEFAULT_TOPOLOGY)
        mlp = MlpNetwork(weights, biases, DEFAULT_TOPOLOGY)
    except ParameterFileError as e:
        print(ERROR_INVALID_PARAMETER + str(e.layer), file=sys.stderr)
        return 1
    except MlpError as e:
        print(e, file=sys.stderr)
        return 1

    runs_dir = args.runs_dir
    if runs_dir is None and (args.plot or args.evaluate):
        runs_dir = "runs"

    if args.evaluate:
        return run_evaluation(mlp, args.evaluate, RunLogger(runs_dir, tag="evaluation"), plot=args.plot)

    run_logger = RunLogger(runs_dir, tag="session") if runs_dir is not None else None
    return mlp_cli(mlp, stdin=stdin, run_logger=run_logger, plot=args.plot)


if __name__ == "__main__":
    sys.exit(main())
