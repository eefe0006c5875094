import numpy as np
import pytest
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sigmoidnet.__main__ import main
from sigmoidnet.errors import DatasetError, DimensionMismatchError, EmptyDatasetError, LabelOutOfRangeError
from sigmoidnet.mlp import squared_error
from sigmoidnet.model_pipeline import ModelPipeline
from sigmoidnet.reporting import Reporter, timed
from sigmoidnet.settings import NetworkConfig


class RecordingReporter(Reporter):
    def __init__(self):
        self.epochs = []
        self.accuracies = []
        self.timings = []

    def epoch_completed(self, epoch, mean_loss):
        self.epochs.append((epoch, mean_loss))

    def evaluation_completed(self, accuracy):
        self.accuracies.append(accuracy)

    def timing(self, label, elapsed_ms):
        self.timings.append((label, elapsed_ms))


def small_config(**overrides):
    values = dict(input_size=4, hidden_size=3, output_size=2, train_size=4, test_size=2,
                  learning_rate=0.3, epochs=3, seed=11)
    values.update(overrides)
    return NetworkConfig(**values)


def write_csv(path, rows):
    path.write_text("\n".join(",".join(str(v) for v in row) for row in rows) + "\n")
    return str(path)


def test_train_reports_every_epoch():
    reporter = RecordingReporter()
    pipeline = ModelPipeline(small_config(epochs=5), reporter=reporter)
    features = np.random.default_rng(0).uniform(0, 1, (6, 4))
    labels = np.array([0, 1, 0, 1, 1, 0])

    losses = pipeline.train(features, labels)

    assert len(losses) == 5, f"Expected 5 epoch losses, got {len(losses)}"
    assert [epoch for epoch, _ in reporter.epochs] == [0, 1, 2, 3, 4]
    assert [loss for _, loss in reporter.epochs] == losses


def test_single_sample_epoch_loss_uses_pre_update_weights():
    """Epoch loss is measured on the forward pass before the update."""
    pipeline = ModelPipeline(small_config(epochs=1), reporter=RecordingReporter())
    x = np.array([[0.3, 0.1, 0.9, 0.5]])

    expected = squared_error(pipeline.model.forward(x[0]).copy(), 1)
    losses = pipeline.train(x, np.array([1]))

    assert losses[0] == pytest.approx(expected)


def test_training_is_deterministic():
    """Same seed and data give the same weight trajectory."""
    features = np.random.default_rng(1).uniform(0, 1, (8, 4))
    labels = np.array([0, 1] * 4)

    a = ModelPipeline(small_config(), reporter=RecordingReporter())
    b = ModelPipeline(small_config(), reporter=RecordingReporter())
    losses_a = a.train(features, labels)
    losses_b = b.train(features, labels)

    assert losses_a == losses_b
    np.testing.assert_array_equal(a.weights.hidden.flat, b.weights.hidden.flat)
    np.testing.assert_array_equal(a.weights.output.flat, b.weights.output.flat)


def test_training_reduces_loss_on_identical_samples():
    pipeline = ModelPipeline(small_config(epochs=50), reporter=RecordingReporter())
    features = np.tile([1.0, 0.0, 1.0, 0.0], (10, 1))
    labels = np.ones(10, dtype=np.int64)

    losses = pipeline.train(features, labels)

    assert losses[-1] < losses[0], \
        f"Loss should decrease during training. Start: {losses[0]:.4f}, End: {losses[-1]:.4f}"


def test_evaluation_reaches_full_accuracy_after_training():
    reporter = RecordingReporter()
    pipeline = ModelPipeline(small_config(epochs=50), reporter=reporter)
    sample = [1.0, 0.0, 1.0, 0.0]
    pipeline.train(np.tile(sample, (10, 1)), np.ones(10, dtype=np.int64))

    result = pipeline.evaluate(np.tile(sample, (5, 1)), np.ones(5, dtype=np.int64))

    assert result.accuracy == 100.0
    assert result.correct == 5 and result.total == 5
    assert reporter.accuracies == [100.0]
    np.testing.assert_array_equal(result.confusion_matrix, [[0, 0], [0, 5]])


def test_evaluation_accuracy_and_read_only_weights():
    pipeline = ModelPipeline(small_config(), reporter=RecordingReporter())
    features = np.random.default_rng(4).uniform(0, 1, (4, 4))
    predicted = np.array([pipeline.model.predict(x) for x in features])
    labels = np.concatenate([predicted[:2], 1 - predicted[2:]])
    before = pipeline.weights.copy()

    result = pipeline.evaluate(features, labels)

    assert result.accuracy == 50.0
    np.testing.assert_array_equal(result.predictions, predicted)
    np.testing.assert_array_equal(pipeline.weights.hidden.flat, before.hidden.flat)
    np.testing.assert_array_equal(pipeline.weights.output.flat, before.output.flat)


def test_train_rejects_dimension_mismatch():
    pipeline = ModelPipeline(small_config(), reporter=RecordingReporter())
    with pytest.raises(DimensionMismatchError):
        pipeline.train(np.zeros((3, 5)), np.zeros(3, dtype=np.int64))


def test_train_rejects_out_of_range_label_before_training():
    pipeline = ModelPipeline(small_config(), reporter=RecordingReporter())
    before = pipeline.weights.copy()

    with pytest.raises(LabelOutOfRangeError) as excinfo:
        pipeline.train(np.zeros((3, 4)), np.array([0, 1, 2]))

    assert excinfo.value.label == 2
    np.testing.assert_array_equal(pipeline.weights.output.flat, before.output.flat)


def test_train_rejects_empty_and_mismatched_sets():
    pipeline = ModelPipeline(small_config(), reporter=RecordingReporter())
    with pytest.raises(EmptyDatasetError):
        pipeline.train(np.zeros((0, 4)), np.zeros(0, dtype=np.int64))
    with pytest.raises(DatasetError):
        pipeline.train(np.zeros((3, 4)), np.zeros(2, dtype=np.int64))
    with pytest.raises(EmptyDatasetError):
        pipeline.evaluate(np.zeros((0, 4)), np.zeros(0, dtype=np.int64))


def test_timed_reports_elapsed_milliseconds():
    reporter = RecordingReporter()
    with timed("train", reporter):
        pass

    assert len(reporter.timings) == 1
    label, elapsed = reporter.timings[0]
    assert label == "train" and elapsed >= 0


def test_run_end_to_end(tmp_path):
    train_rows = [[1, 255, 0, 255, 0]] * 4
    test_rows = [[1, 255, 0, 255, 0]] * 2
    config = small_config(
        epochs=50,
        train_data_path=write_csv(tmp_path / "train.csv", train_rows),
        test_data_path=write_csv(tmp_path / "test.csv", test_rows)
    )
    reporter = RecordingReporter()
    plot_path = tmp_path / "loss.png"

    losses, result = ModelPipeline(config, reporter=reporter).run(plot_path=str(plot_path))

    assert len(losses) == 50
    assert result.accuracy == 100.0
    assert [label for label, _ in reporter.timings] == ["load_and_norm", "train", "test"]
    assert plot_path.exists()


def test_cli_main(tmp_path):
    train_csv = write_csv(tmp_path / "train.csv", [[0, 0, 255, 0, 255]] * 4)
    test_csv = write_csv(tmp_path / "test.csv", [[0, 0, 255, 0, 255]] * 2)
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        "input_size: 4\nhidden_size: 3\noutput_size: 2\ntrain_size: 4\ntest_size: 2\nepochs: 2\n"
    )

    assert main(["--config", str(config_path), "--train", train_csv, "--test", test_csv]) == 0
    assert main(["--config", str(config_path), "--train", str(tmp_path / "missing.csv"), "--test", test_csv]) == 1
    assert main(["--config", str(config_path), "--epochs", "0"]) == 1


def test_nan_weight_propagates_without_crashing():
    """NaN weights are not guarded: the loss turns NaN and accuracy degrades."""
    pipeline = ModelPipeline(small_config(epochs=2), reporter=RecordingReporter())
    pipeline.weights.output.set(0, 0, np.nan)
    features = np.full((3, 4), 0.5)
    labels = np.ones(3, dtype=np.int64)

    losses = pipeline.train(features, labels)
    result = pipeline.evaluate(features, labels)

    assert all(np.isnan(loss) for loss in losses)
    assert np.isnan(pipeline.weights.hidden.flat).all()
    # Every output is NaN, so the scan stays on index 0
    np.testing.assert_array_equal(result.predictions, [0, 0, 0])
    assert result.accuracy == 0.0


def test_timed_reports_nothing_when_block_raises():
    reporter = RecordingReporter()
    with pytest.raises(RuntimeError):
        with timed("train", reporter):
            raise RuntimeError("boom")

    assert reporter.timings == []


def test_evaluate_rejects_out_of_range_label():
    reporter = RecordingReporter()
    pipeline = ModelPipeline(small_config(), reporter=reporter)

    with pytest.raises(LabelOutOfRangeError) as excinfo:
        pipeline.evaluate(np.zeros((3, 4)), np.array([0, 5, 1]))

    assert excinfo.value.label == 5
    assert reporter.accuracies == []


def test_non_integer_label_is_reported():
    pipeline = ModelPipeline(small_config(), reporter=RecordingReporter())

    with pytest.raises(LabelOutOfRangeError) as excinfo:
        pipeline.train(np.zeros((3, 4)), np.array([0.0, 1.5, 1.0]))
    assert excinfo.value.label == 1.5

    # Integer-valued floats are accepted
    losses = pipeline.train(np.zeros((2, 4)), np.array([0.0, 1.0]), epochs=1)
    assert len(losses) == 1


def test_cli_main_rejects_non_numeric_data(tmp_path):
    train_csv = write_csv(tmp_path / "train.csv", [[0, 0, "x", 0, 255]] * 4)
    test_csv = write_csv(tmp_path / "test.csv", [[0, 0, 255, 0, 255]] * 2)
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        "input_size: 4\nhidden_size: 3\noutput_size: 2\ntrain_size: 4\ntest_size: 2\nepochs: 2\n"
    )

    assert main(["--config", str(config_path), "--train", train_csv, "--test", test_csv]) == 1
