from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np
from sklearn.metrics import confusion_matrix

from config.logging_config import logger
from .data_pipeline import DataPipeline
from .errors import DatasetError, EmptyDatasetError, LabelOutOfRangeError
from .mlp import MLPOneHidden, check_dimensions
from .reporting import LoggingReporter, log_confusion_matrix, plot_loss, timed
from .weights import NetworkWeights


@dataclass
class EvaluationResult:
    accuracy: float
    correct: int
    total: int
    predictions: np.ndarray
    confusion_matrix: np.ndarray


class ModelPipeline:
    """
    End-to-end training and evaluation of the one-hidden-layer sigmoid network.

    Training mutates the network weights one sample at a time, evaluation only
    reads them. The weights are the only state carried from one to the other.
    """
    def __init__(self, config, reporter=None, weights: Optional[NetworkWeights] = None) -> None:
        """
        Args:
            config (NetworkConfig): Sizes, hyperparameters and data paths
            reporter (Reporter): Receives epoch losses, accuracy and timings
            weights (NetworkWeights, optional): Seeded from config when omitted
        """
        self.config = config
        self.reporter = reporter if reporter is not None else LoggingReporter(config.epochs)
        self.data_pipeline = DataPipeline(config)
        self.model = MLPOneHidden(config, weights)

    @property
    def weights(self) -> NetworkWeights:
        return self.model.weights

    def _check_dataset(self, features, labels, name):
        check_dimensions(features, self.config.input_size)
        if features.ndim != 2:
            raise DatasetError(f"{name} features must be a 2-D array")
        if len(features) == 0:
            raise EmptyDatasetError(f"{name} set is empty")
        if len(features) != len(labels):
            raise DatasetError(f"{name} set has {len(features)} feature vectors but {len(labels)} labels")

    def _check_labels(self, labels):
        """
        Rejects the first label that is not an integer in [0, output_size).
        Integer-valued floats are accepted and returned as int64.
        """
        labels = np.asarray(labels)
        if np.issubdtype(labels.dtype, np.floating):
            non_integer = np.flatnonzero(~np.isfinite(labels) | (labels != np.round(labels)))
            if non_integer.size:
                raise LabelOutOfRangeError(labels[non_integer[0]].item(), self.config.output_size)
            labels = labels.astype(np.int64)
        elif not np.issubdtype(labels.dtype, np.integer):
            raise LabelOutOfRangeError(labels[0], self.config.output_size)

        bad = np.flatnonzero((labels < 0) | (labels >= self.config.output_size))
        if bad.size:
            raise LabelOutOfRangeError(int(labels[bad[0]]), self.config.output_size)
        return labels

    def train(self, features, labels, epochs=None) -> List[float]:
        """
        Online gradient descent over the full training set, in dataset order,
        for a fixed number of epochs
        ---
        Args:
            features (np.ndarray): (n, input_size) normalized feature vectors
            labels (np.ndarray): (n,) class indices
            epochs (int, optional): Defaults to config.epochs
        Returns:
            losses (List[float]): Mean squared error for each epoch
        """
        features = np.asarray(features, dtype=np.float64)
        self._check_dataset(features, labels, "Training")
        labels = self._check_labels(labels)

        if epochs is None:
            epochs = self.config.epochs

        n_samples = len(features)
        losses = []

        logger.info(f"Training on {n_samples} samples for {epochs} epochs, learning rate {self.model.learning_rate}")

        for epoch in range(epochs):
            total_loss = 0.0

            for x, label in zip(features, labels):
                self.model.forward(x)
                total_loss += self.model.loss(label)
                self.model.backward(x, label)

            mean_loss = total_loss / n_samples
            losses.append(mean_loss)
            self.reporter.epoch_completed(epoch, mean_loss)

        return losses

    def evaluate(self, features, labels) -> EvaluationResult:
        """
        Forward-only pass over the held-out set
        ---
        Returns:
            EvaluationResult: accuracy in percent, predictions and confusion matrix
        """
        features = np.asarray(features, dtype=np.float64)
        self._check_dataset(features, labels, "Test")
        labels = self._check_labels(labels)

        predictions = np.array([self.model.predict(x) for x in features], dtype=np.int64)

        correct = int(np.sum(predictions == labels))
        total = len(labels)
        accuracy = correct / total * 100.0

        conf_matrix = confusion_matrix(labels, predictions, labels=list(range(self.config.output_size)))

        self.reporter.evaluation_completed(accuracy)

        return EvaluationResult(
            accuracy=accuracy,
            correct=correct,
            total=total,
            predictions=predictions,
            confusion_matrix=conf_matrix
        )

    def run(self, plot_path=None) -> Tuple[List[float], EvaluationResult]:
        """
        Loads and normalizes both datasets, trains, then evaluates,
        timing each stage
        """
        with timed("load_and_norm", self.reporter):
            (train_x, train_y), (test_x, test_y) = self.data_pipeline.load_and_normalize()

        logger.info("Training")
        with timed("train", self.reporter):
            losses = self.train(train_x, train_y)

        with timed("test", self.reporter):
            result = self.evaluate(test_x, test_y)

        log_confusion_matrix(result.confusion_matrix)

        if plot_path is not None:
            plot_loss(losses, plot_path)

        return losses, result
