import argparse
import sys

from config.logging_config import logger
from .errors import SigmoidNetError
from .model_pipeline import ModelPipeline
from .settings import load_config

DEFAULT_CONFIG = "config/config.yaml"


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Train a one-hidden-layer sigmoid network on MNIST CSV data with online backpropagation.",
    )
    parser.add_argument("--config", default=DEFAULT_CONFIG, help="YAML configuration file.")
    parser.add_argument("--train", dest="train_data_path", help="Training CSV file.")
    parser.add_argument("--test", dest="test_data_path", help="Held-out CSV file.")
    parser.add_argument("--train-size", type=int, help="Number of training samples to load.")
    parser.add_argument("--test-size", type=int, help="Number of held-out samples to load.")
    parser.add_argument("--epochs", type=int, help="Number of training epochs.")
    parser.add_argument("--learning-rate", type=float, help="Learning rate.")
    parser.add_argument("--hidden-size", type=int, help="Hidden layer size.")
    parser.add_argument("--seed", type=int, help="Weight initialization seed.")
    parser.add_argument("--plot", metavar="PATH", help="Save the training loss curve to PATH.")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)

    try:
        config = load_config(args.config).replace(
            train_data_path=args.train_data_path,
            test_data_path=args.test_data_path,
            train_size=args.train_size,
            test_size=args.test_size,
            epochs=args.epochs,
            learning_rate=args.learning_rate,
            hidden_size=args.hidden_size,
            seed=args.seed,
        )
        ModelPipeline(config).run(plot_path=args.plot)
    except SigmoidNetError as e:
        logger.error(str(e))
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
