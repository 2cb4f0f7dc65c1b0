# helpers/logger.py
import csv, json, datetime, pathlib

import numpy as np
import matplotlib.pyplot as plt
import matplotlib.cm as colormap


def confusion_matrix(y_true, y_pred, num_classes=10):
    # cm[i, j] = samples of true class i predicted as j
    cm = np.zeros((num_classes, num_classes), dtype=np.int64)
    for t, p in zip(y_true, y_pred):
        t, p = int(t), int(p)
        if not (0 <= t < num_classes and 0 <= p < num_classes):
            raise ValueError(f"class ({t}, {p}) outside [0, {num_classes})")
        cm[t, p] += 1
    return cm


def metrics_from_confusion_matrix(cm, eps=1e-12):
    """
    Accuracy plus per-class and macro precision / recall / F1.

    Args:
        cm: (n_classes, n_classes) confusion matrix
        eps: small value to avoid division by zero

    Returns:
        dict of plain floats and lists (JSON friendly)
    """
    TP = np.diag(cm).astype(np.float64)
    FP = cm.sum(axis=0) - TP
    FN = cm.sum(axis=1) - TP

    precision = TP / (TP + FP + eps)
    recall    = TP / (TP + FN + eps)
    f1        = 2 * precision * recall / (precision + recall + eps)

    total = cm.sum()
    accuracy = float(TP.sum() / total) if total > 0 else 0.0

    return {
        "accuracy": accuracy,
        "macro_precision": float(precision.mean()),
        "macro_recall": float(recall.mean()),
        "macro_f1": float(f1.mean()),
        "precision_per_class": precision.tolist(),
        "recall_per_class": recall.tolist(),
        "f1_per_class": f1.tolist(),
        "support": cm.sum(axis=1).tolist(),
    }


def metrics_from_predictions(y_true, y_pred, num_classes=10, eps=1e-12):
    cm = confusion_matrix(y_true, y_pred, num_classes)
    metrics = metrics_from_confusion_matrix(cm, eps=eps)
    metrics["confusion_matrix"] = cm
    return metrics


class RunLogger:
    """
    Keeps the record of one CLI session or evaluation run in
    <root>/<tag>_<timestamp>/: predictions.csv, history.json, plots.
    """

    FIELDS = ["index", "source", "prediction", "probability", "label", "correct"]

    def __init__(self, root="runs", tag="run"):
        ts = datetime.datetime.now().strftime("%Y%m%d-%H%M%S-%f")
        self.root = pathlib.Path(root)
        self.dir = self.root / f"{tag}_{ts}"
        self.dir.mkdir(parents=True, exist_ok=True)
        self.csv_path = self.dir / "predictions.csv"
        self.json_path = self.dir / "history.json"
        self.records = []  # one dict per prediction
        self._csv_header_written = False

    # ---------- logging ----------
    def log_prediction(self, source, digit, label=None):
        row = {
            "index": len(self.records),
            "source": str(source),
            "prediction": int(digit.value),
            "probability": float(digit.probability),
            "label": "" if label is None else int(label),
            "correct": "" if label is None else int(label) == int(digit.value),
        }
        self.records.append(row)
        with open(self.csv_path, "a", newline="") as f:
            writer = csv.DictWriter(f, fieldnames=self.FIELDS)
            if not self._csv_header_written:
                writer.writeheader()
                self._csv_header_written = True
            writer.writerow(row)
        return row

    def save_json(self):
        with open(self.json_path, "w") as f:
            json.dump(self.records, f, indent=2)
        return str(self.json_path)

    # ---------- plotting ----------
    def _plots_dir(self, subdir):
        out = self.dir / subdir
        out.mkdir(parents=True, exist_ok=True)
        return out

    def plot_prediction(self, image, probabilities, tag="sample", subdir="plots"):
        """
        Saves the input image next to the output distribution as prediction_<tag>.png.
        image: (28, 28) Matrix, probabilities: (10, 1) Matrix
        """
        outdir = self._plots_dir(subdir)
        probs = probabilities.to_numpy().reshape(-1)
        best = int(np.argmax(probs))

        fig, (ax_img, ax_bar) = plt.subplots(1, 2, figsize=(8, 4))
        ax_img.imshow(image.to_numpy(), cmap=colormap.gray)
        ax_img.set_title(f"Prediction: {best} ({probs[best]:.3f})")
        ax_img.axis("off")

        ticks = np.arange(probs.size)
        bars = ax_bar.bar(ticks, probs, color="tab:blue")
        bars[best].set_color("tab:orange")
        ax_bar.set_xticks(ticks)
        ax_bar.set_ylim(0.0, 1.0)
        ax_bar.set_xlabel("Digit")
        ax_bar.set_ylabel("Probability")

        fig.tight_layout()
        path = outdir / f"prediction_{tag}.png"
        fig.savefig(path, dpi=160)
        plt.close(fig)
        return str(path)

    def plot_confusion_matrix(self, cm, tag="run", subdir="plots"):
        """
        Saves the digit confusion matrix as confusion_matrix_<tag>.png.

        Cells are coloured by the share of each true digit (row) and
        annotated with the raw count; the y tick labels carry the per-digit
        recall and the title the overall accuracy.
        cm: (num_classes, num_classes) integer matrix, rows = true digit
        """
        outdir = self._plots_dir(subdir)
        cm = np.asarray(cm)
        support = cm.sum(axis=1)
        shares = cm / np.maximum(support, 1)[:, None]
        accuracy = np.trace(cm) / max(cm.sum(), 1)

        digits = np.arange(cm.shape[0])
        fig, ax = plt.subplots(figsize=(7, 6))
        heat = ax.imshow(shares, cmap=colormap.Blues, vmin=0.0, vmax=1.0)
        fig.colorbar(heat, ax=ax, label="Share of true digit")

        ax.set_xticks(digits)
        ax.set_yticks(digits)
        ax.set_yticklabels([f"{d} ({shares[d, d]:.2f})" for d in digits])
        ax.set_xlabel("Predicted digit")
        ax.set_ylabel("True digit (recall)")
        ax.set_title(f"Confusion matrix ({tag}), accuracy {accuracy:.3f}")

        # empty cells stay blank so the misclassifications stand out
        for i, j in zip(*np.nonzero(cm)):
            ax.text(j, i, str(cm[i, j]), ha="center", va="center",
                    color="white" if shares[i, j] > 0.5 else "black")

        fig.tight_layout()
        path = outdir / f"confusion_matrix_{tag}.png"
        fig.savefig(path, dpi=160)
        plt.close(fig)
        return str(path)

    def save_metrics_summary(self, metrics, tag="run", filename="metrics_summary.json"):
        summary = {
            "experiment_tag": tag,
            "timestamp": datetime.datetime.now().isoformat(),
            "samples": len(self.records),
            "overall_metrics": {
                "accuracy": metrics.get("accuracy", 0.0),
                "macro_precision": metrics.get("macro_precision", 0.0),
                "macro_recall": metrics.get("macro_recall", 0.0),
                "macro_f1": metrics.get("macro_f1", 0.0),
            },
            "per_class_metrics": {
                "precision": metrics.get("precision_per_class", []),
                "recall": metrics.get("recall_per_class", []),
                "f1": metrics.get("f1_per_class", []),
                "support": metrics.get("support", []),
            },
        }
        if "confusion_matrix" in metrics:
            summary["confusion_matrix"] = np.asarray(metrics["confusion_matrix"]).tolist()

        output_path = self.dir / filename
        with open(output_path, "w") as f:
            json.dump(summary, f, indent=2)
        return str(output_path)
