import logging

from .logger import metrics_from_predictions

logger = logging.getLogger(__name__)


def evaluate(network, samples, run_logger=None, plot=False):
    """
    Runs the network on every (source, image, label) sample, one at a time,
    and returns accuracy / precision / recall / F1 and the confusion matrix.
    """
    num_classes = network.topology.output_size
    y_true, y_pred = [], []

    for source, image, label in samples:
        digit = network.predict_image(image)
        y_true.append(label)
        y_pred.append(digit.value)
        if run_logger is not None:
            run_logger.log_prediction(source, digit, label)
            if plot:
                probs = network.forward(image.copy().vectorize())
                run_logger.plot_prediction(image, probs, tag=str(len(y_true) - 1))

    if not y_true:
        logger.warning("No samples to evaluate")

    metrics = metrics_from_predictions(y_true, y_pred, num_classes=num_classes)
    logger.info(
        "Evaluated %d samples: accuracy %.4f, macro F1 %.4f",
        len(y_true), metrics["accuracy"], metrics["macro_f1"],
    )

    if run_logger is not None:
        run_logger.save_json()
        run_logger.save_metrics_summary(metrics, tag="evaluation")
        if y_true:
            run_logger.plot_confusion_matrix(metrics["confusion_matrix"], tag="evaluation")
    return metrics
