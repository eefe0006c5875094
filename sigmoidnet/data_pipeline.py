import logging
import math
import os

import numpy as np
import pandas as pd

from config.logging_config import logger
from .errors import (
    DatasetError,
    DatasetNotFoundError,
    DimensionMismatchError,
    EmptyDatasetError,
    IncompleteDatasetError,
)

PIXEL_MAX = 255.0


def normalize(features):
    """
    Scales raw pixel values from [0, 255] to [0, 1] in place
    ---
    Args:
        features (np.ndarray): Float array, modified in place
    Returns:
        features (np.ndarray)
    """
    np.divide(features, PIXEL_MAX, out=features)
    return features


class DataPipeline():
    """
    Reads MNIST-style CSV files: one sample per line, the label first
    followed by input_size pixel values, no header row.
    """

    def __init__(self, config):
        self.config = config

    def load(self, path, count=None):
        """
        Loads the first `count` samples of a CSV file, all of them when count is None
        ---
        Args:
            path (str): CSV file
            count (int, optional): Number of samples required
        Returns:
            features, labels (tuple): float64 (count, input_size) and int64 (count,) arrays
        """
        if not os.path.isfile(path):
            raise DatasetNotFoundError(f"Failed to open file: {path}")

        self._check_row_widths(path, count)

        try:
            df = pd.read_csv(path, header=None, nrows=count)
        except pd.errors.EmptyDataError as e:
            raise EmptyDatasetError(f"No samples in {path}") from e
        except pd.errors.ParserError as e:
            raise DatasetError(f"Malformed rows in {path}: {e}") from e

        if len(df) == 0:
            raise EmptyDatasetError(f"No samples in {path}")

        if count is not None and len(df) < count:
            raise IncompleteDatasetError(f"Requested {count} samples from {path}, found {len(df)}")

        # Empty cells are read as NaN
        missing = df.isnull().any(axis=1)
        if missing.any():
            row = int(np.flatnonzero(missing.to_numpy())[0])
            raise DatasetError(f"Missing values on row {row + 1} of {path}")

        try:
            features = df.iloc[:, 1:].to_numpy(dtype=np.float64)
            raw_labels = df.iloc[:, 0].to_numpy(dtype=np.float64)
        except (TypeError, ValueError) as e:
            raise DatasetError(f"Non-numeric values in {path}: {e}") from e

        non_integer = np.flatnonzero(raw_labels != np.floor(raw_labels))
        if non_integer.size:
            row = int(non_integer[0])
            raise DatasetError(f"Non-integer label {raw_labels[row]} on row {row + 1} of {path}")
        labels = raw_labels.astype(np.int64)

        logger.info(f"Loaded {len(labels)} samples from {path}")
        return features, labels

    def _check_row_widths(self, path, count):
        """
        Every row must hold a label plus exactly input_size features.
        Only the first `count` non-blank rows are inspected.
        """
        rows = 0
        with open(path, 'r') as f:
            for line in f:
                if not line.strip():
                    continue
                n_features = line.count(',')
                if n_features != self.config.input_size:
                    raise DimensionMismatchError(self.config.input_size, n_features)
                rows += 1
                if count is not None and rows >= count:
                    break

    def load_train(self):
        return self.load(self._path('train_data_path'), self.config.train_size)

    def load_test(self):
        return self.load(self._path('test_data_path'), self.config.test_size)

    def load_and_normalize(self):
        """
        Loads and normalizes the held-out set, then the training set
        ---
        Returns:
            (train_features, train_labels), (test_features, test_labels)
        """
        test_features, test_labels = self.load_test()
        normalize(test_features)

        train_features, train_labels = self.load_train()
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(f"First training samples:\n{self.describe(train_features, train_labels, 2)}")
        normalize(train_features)

        return (train_features, train_labels), (test_features, test_labels)

    def describe(self, features, labels, n=1):
        """
        Text rendering of the first n samples, one image row per line
        """
        size = features.shape[1]
        side = math.isqrt(size)
        width = side if side * side == size else size

        lines = []
        for i in range(min(n, len(labels))):
            lines.append(f"label: {labels[i]}")
            for start in range(0, size, width):
                lines.append(" ".join(f"{int(v):3d}" for v in features[i, start:start + width]))
            lines.append("")
        return "\n".join(lines)

    def _path(self, key):
        path = getattr(self.config, key)
        if path is None:
            raise DatasetNotFoundError(f"No {key} configured")
        return path
