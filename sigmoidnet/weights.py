import numpy as np


def initialize_weights(buffer, count, rng):
    """
    Fills the first `count` entries of `buffer` with uniform values in [-1, 1].

    No fan-in/fan-out scaling is applied.
    ---
    Args:
        buffer (np.ndarray): Flat float64 buffer, modified in place
        count (int): Number of leading entries to fill
        rng (np.random.Generator): Seeded generator
    """
    buffer[:count] = rng.uniform(-1.0, 1.0, size=count)


class WeightMatrix:
    """
    Dense (rows x cols) weight matrix backed by a flat row-major buffer.

    Element (row, col) lives at flat index row * cols + col.
    """

    def __init__(self, rows, cols):
        self.rows = rows
        self.cols = cols
        self.flat = np.zeros(rows * cols, dtype=np.float64)

    def __len__(self):
        return self.flat.size

    @property
    def shape(self):
        return (self.rows, self.cols)

    def index(self, row, col):
        return row * self.cols + col

    def get(self, row, col):
        return self.flat[self.index(row, col)]

    def set(self, row, col, value):
        self.flat[self.index(row, col)] = value

    def as_array(self):
        """Returns a (rows, cols) view sharing the flat buffer."""
        return self.flat.reshape(self.rows, self.cols)

    def copy(self):
        clone = WeightMatrix(self.rows, self.cols)
        clone.flat[:] = self.flat
        return clone

    def initialize(self, rng):
        initialize_weights(self.flat, len(self), rng)


class NetworkWeights:
    """
    The parameter store: hidden (hidden_size x input_size) and
    output (output_size x hidden_size) weights. There are no bias terms.
    """

    def __init__(self, hidden, output):
        if hidden.rows != output.cols:
            raise ValueError(
                f"Hidden layer width {hidden.rows} does not match output layer input {output.cols}"
            )
        self.hidden = hidden
        self.output = output

    @classmethod
    def initialize(cls, config):
        """
        Allocates both matrices and fills hidden weights first, then output
        weights, from one generator seeded with config.seed
        """
        rng = np.random.default_rng(config.seed)

        hidden = WeightMatrix(config.hidden_size, config.input_size)
        hidden.initialize(rng)

        output = WeightMatrix(config.output_size, config.hidden_size)
        output.initialize(rng)

        return cls(hidden, output)

    def copy(self):
        return NetworkWeights(self.hidden.copy(), self.output.copy())
