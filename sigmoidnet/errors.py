class SigmoidNetError(Exception):
    """Base class for every error raised by sigmoidnet."""


class ConfigError(SigmoidNetError, ValueError):
    """Invalid or unknown configuration value."""


class LabelOutOfRangeError(SigmoidNetError, ValueError):
    def __init__(self, label, output_size):
        self.label = label
        self.output_size = output_size
        super().__init__(f"Label {label} out of range [0, {output_size})")


class DimensionMismatchError(SigmoidNetError, ValueError):
    def __init__(self, expected, actual):
        self.expected = expected
        self.actual = actual
        super().__init__(f"Expected feature vectors of length {expected}, got {actual}")


class DatasetError(SigmoidNetError):
    """Dataset could not be loaded in full."""


class DatasetNotFoundError(DatasetError, FileNotFoundError):
    pass


class EmptyDatasetError(DatasetError):
    pass


class IncompleteDatasetError(DatasetError):
    pass
