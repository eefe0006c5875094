import time
from contextlib import contextmanager

import matplotlib.pyplot as plt
import pandas as pd

from config.logging_config import logger


class Reporter:
    """
    Receives training progress, the final accuracy and timing measurements.
    The base class ignores everything.
    """

    def epoch_completed(self, epoch, mean_loss):
        pass

    def evaluation_completed(self, accuracy):
        pass

    def timing(self, label, elapsed_ms):
        pass


class LoggingReporter(Reporter):
    def __init__(self, epochs=None):
        self.epochs = epochs

    def epoch_completed(self, epoch, mean_loss):
        if self.epochs is not None:
            logger.info(f"Epoch {epoch + 1}/{self.epochs}, Loss: {mean_loss:.6f}")
        else:
            logger.info(f"Epoch {epoch + 1}, Loss: {mean_loss:.6f}")

    def evaluation_completed(self, accuracy):
        logger.info(f"Test Accuracy: {accuracy:.2f}%")

    def timing(self, label, elapsed_ms):
        logger.info(f"{label} took {elapsed_ms:.0f} ms")


@contextmanager
def timed(label, reporter):
    """
    Reports the wall time of the enclosed block, in milliseconds, as `label`
    """
    start = time.perf_counter()
    yield
    reporter.timing(label, (time.perf_counter() - start) * 1000.0)


def log_confusion_matrix(conf_matrix):
    classes = [str(i) for i in range(conf_matrix.shape[0])]
    df_cm = pd.DataFrame(conf_matrix, index=classes, columns=classes)
    logger.info("==== Confusion Matrix ====")
    logger.info(f"\n{df_cm}")
    logger.info(f"Total samples: {int(conf_matrix.sum())}")
    return df_cm


def plot_loss(losses, path):
    """
    Saves the per-epoch mean training loss curve
    ---
    Args:
        losses (List[float]): Mean loss for each epoch
        path (str): Output image path
    """
    fig, ax = plt.subplots(figsize=(8, 5))

    epochs = range(1, len(losses) + 1)
    ax.plot(epochs, losses, 'b-', label='Training Loss', linewidth=2, marker='o')
    ax.set_xlabel('Epoch')
    ax.set_ylabel('Mean Squared Error')
    ax.set_title('Training Loss')
    ax.legend()
    ax.grid(True, alpha=0.3)

    fig.tight_layout()
    fig.savefig(path)
    plt.close(fig)
    logger.info(f"Loss curve saved to {path}")
