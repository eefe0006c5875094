import numpy as np


def sigmoid(x):
    """
    Sigmoid activation function: sigma(x) = 1 / (1 + exp(-x))

    Squashes input values to range (0, 1). Works on scalars and arrays.
    """
    return 1.0 / (1.0 + np.exp(-x))


def sigmoid_derivative_from_output(y):
    """
    Derivative of the sigmoid written in terms of its output: y * (1 - y)

    Takes the already-activated value y = sigma(x), never the pre-activation sum.
    Maximum gradient (0.25) occurs at y=0.5, reaches 0 at y=0 and y=1.
    """
    return y * (1.0 - y)
