import numbers

import numpy as np

from .activation import sigmoid, sigmoid_derivative_from_output
from .errors import DimensionMismatchError, LabelOutOfRangeError
from .weights import NetworkWeights


def one_hot(label, output_size):
    """
    Builds the training target for a class index: 1.0 at `label`, 0.0 elsewhere.
    ---
    Args:
        label (int): Class index in [0, output_size)
        output_size (int): Number of output units
    Returns:
        target (np.ndarray): Shape (output_size,)
    """
    if not isinstance(label, numbers.Integral) or not 0 <= label < output_size:
        raise LabelOutOfRangeError(label, output_size)

    target = np.zeros(output_size, dtype=np.float64)
    target[int(label)] = 1.0
    return target


def squared_error(output, label):
    """Sum over output units of (target - output)^2 against the one-hot target."""
    target = one_hot(label, output.shape[0])
    return float(np.sum((target - output) ** 2))


def check_dimensions(features, input_size):
    """
    Rejects a feature matrix (or single vector) whose rows are not `input_size` long.
    Done once per dataset so the forward pass never has to.
    """
    features = np.asarray(features)
    actual = features.shape[-1] if features.ndim > 0 else 0
    if features.ndim not in (1, 2) or actual != input_size:
        raise DimensionMismatchError(input_size, actual)


def forward(x, hidden_weights, output_weights, hidden, output):
    """
    Forward propagation through the network for one sample.

    Computes:
    1. Hidden layer: hidden[i] = sigmoid(sum_j x[j] * Wh[i, j])
    2. Output layer: output[k] = sigmoid(sum_j hidden[j] * Wo[k, j])

    No bias term is added. Both buffers are overwritten, weights are only read.
    ---
    Args:
        x (np.ndarray): Feature vector of shape (input_size,)
        hidden_weights (WeightMatrix): (hidden_size x input_size)
        output_weights (WeightMatrix): (output_size x hidden_size)
        hidden (np.ndarray): Hidden activation buffer, shape (hidden_size,)
        output (np.ndarray): Output activation buffer, shape (output_size,)
    Returns:
        hidden, output (tuple): The filled buffers
    """
    hidden[:] = sigmoid(hidden_weights.as_array() @ x)
    output[:] = sigmoid(output_weights.as_array() @ hidden)
    return hidden, output


def backward(x, label, hidden_weights, output_weights, hidden, output, learning_rate):
    """
    Backpropagation for one sample, updating both weight matrices in place.

    `hidden` and `output` must be the buffers produced by the forward pass on `x`
    with the current weights.

    1. Output error: o_err = (target - output) * output * (1 - output)
    2. Hidden error: h_err = (Wo.T . o_err) * hidden * (1 - hidden)
       (read from the output weights before they change)
    3. Wo += learning_rate * outer(o_err, hidden)
    4. Wh += learning_rate * outer(h_err, x)
    ---
    Args:
        x (np.ndarray): Feature vector of shape (input_size,)
        label (int): True class index
        hidden_weights (WeightMatrix): Updated in place
        output_weights (WeightMatrix): Updated in place
        hidden (np.ndarray): Hidden activations from the forward pass
        output (np.ndarray): Output activations from the forward pass
        learning_rate (float): Step size
    Returns:
        o_error, h_error (tuple): Error signals of both layers
    """
    target = one_hot(label, output.shape[0])

    w_out = output_weights.as_array()
    w_hidden = hidden_weights.as_array()

    # ===== Error signals =====
    o_error = (target - output) * sigmoid_derivative_from_output(output)
    h_error = (w_out.T @ o_error) * sigmoid_derivative_from_output(hidden)

    # ===== Update weights (views share the flat buffers) =====
    w_out += learning_rate * np.outer(o_error, hidden)
    w_hidden += learning_rate * np.outer(h_error, x)

    return o_error, h_error


def predict_label(output):
    """
    Index of the largest output activation, the lowest index wins ties.

    Behaves like a left-to-right scan from index 0 that only moves on a strict
    `>`: a NaN unit is never picked, and a NaN at index 0 is never replaced.
    """
    if np.isnan(output[0]):
        return 0
    return int(np.argmax(np.where(np.isnan(output), -np.inf, output)))


class MLPOneHidden:
    """
    A one-hidden-layer sigmoid network trained one sample at a time.

    Architecture:
    Input Layer -> Hidden Layer (Sigmoid) -> Output Layer (Sigmoid)

    There are no biases and no softmax: classification is the argmax over
    independent sigmoid units.
    """

    def __init__(self, config, weights=None):
        """
        Args:
            config (NetworkConfig): Sizes and learning rate
            weights (NetworkWeights, optional): Initialized from config.seed when omitted
        """
        self.config = config
        self.input_size = config.input_size
        self.hidden_size = config.hidden_size
        self.output_size = config.output_size
        self.learning_rate = config.learning_rate

        self.weights = weights if weights is not None else NetworkWeights.initialize(config)
        if self.weights.hidden.shape != (self.hidden_size, self.input_size):
            raise DimensionMismatchError(self.input_size, self.weights.hidden.cols)
        if self.weights.output.shape != (self.output_size, self.hidden_size):
            raise DimensionMismatchError(self.hidden_size, self.weights.output.cols)

        # Scratch buffers, overwritten by every forward pass
        self.hidden = np.zeros(self.hidden_size, dtype=np.float64)
        self.output = np.zeros(self.output_size, dtype=np.float64)

    def forward(self, features):
        forward(features, self.weights.hidden, self.weights.output, self.hidden, self.output)
        return self.output

    def loss(self, label):
        """Squared error of the most recent forward pass."""
        return squared_error(self.output, label)

    def backward(self, features, label):
        return backward(
            features, label,
            self.weights.hidden, self.weights.output,
            self.hidden, self.output,
            self.learning_rate
        )

    def predict(self, features):
        return predict_label(self.forward(features))
