from .activation import sigmoid, sigmoid_derivative_from_output
from .data_pipeline import DataPipeline, normalize
from .model_pipeline import EvaluationResult, ModelPipeline
from .mlp import MLPOneHidden, backward, forward, predict_label
from .settings import NetworkConfig, load_config
from .weights import NetworkWeights, WeightMatrix, initialize_weights
