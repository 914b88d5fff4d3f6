from collections import Counter

import numpy as np
import pytest

from backpropnet.core.errors import DimensionMismatch
from backpropnet.core.network import Network
from backpropnet.core.types import Sample, TrainingReport


def _identity_dataset(n: int = 32):
    xs = np.linspace(-1.0, 1.0, n)
    return [([x], [x]) for x in xs]


def _sine_dataset(n: int = 40):
    xs = np.linspace(-1.0, 1.0, n)
    return [Sample.of([x], [np.sin(np.pi * x) * 0.8]) for x in xs]


def test_convergence_on_single_repeated_sample():
    network = Network([1, 1], learning_rate=0.5, seed=0, output_activation="linear")
    dataset = [([0.5], [0.5])] * 50
    report = network.train_batch(dataset, max_epochs=50, target_error=1e-3)
    assert report.final_error < 1e-3
    assert report.converged
    assert report.epochs_to_converge == report.epochs <= 50
    assert report.final_error == report.error_history[-1]


def test_identity_error_decreases_over_first_epochs():
    network = Network([1, 1], learning_rate=0.1, seed=42, output_activation="linear")
    report = network.train_batch(_identity_dataset(), max_epochs=6, target_error=0.0)
    history = report.error_history
    assert len(history) == 6
    assert all(later < earlier for earlier, later in zip(history, history[1:]))


def test_same_seed_gives_identical_history():
    def run(seed):
        network = Network([1, 6, 1], 0.05, seed=seed, hidden_activation="tanh")
        return network.train_batch(_sine_dataset(), max_epochs=10, target_error=0.0)

    first, second = run(3), run(3)
    assert first.error_history == second.error_history
    assert run(4).error_history != first.error_history


def test_every_sample_visited_once_per_epoch(monkeypatch):
    network = Network([1, 1], 0.01, seed=5)
    dataset = _identity_dataset(10)
    seen = []
    original = network.train_one

    def spy(inputs, expected):
        seen.append(inputs[0])
        return original(inputs, expected)

    monkeypatch.setattr(network, "train_one", spy)
    network.train_batch(dataset, max_epochs=3, target_error=0.0)
    assert len(seen) == 30
    expected = Counter(x for (x,), _ in dataset)
    for epoch in range(3):
        assert Counter(seen[epoch * 10 : (epoch + 1) * 10]) == expected
    assert seen[:10] != seen[10:20] or seen[10:20] != seen[20:30]


def test_no_target_reached_leaves_convergence_unset():
    network = Network([1, 4, 1], 0.01, seed=1, hidden_activation="tanh")
    report = network.train_batch(_sine_dataset(), max_epochs=3, target_error=-1.0)
    assert isinstance(report, TrainingReport)
    assert report.epochs == 3
    assert report.epochs_to_converge is None
    assert not report.converged
    assert report.improvement == report.initial_error - report.final_error


def test_bad_sample_aborts_before_training():
    network = Network([1, 1], 0.1, seed=0)
    before = network.state_dict()
    dataset = _identity_dataset(5) + [([0.1, 0.2], [0.3])]
    with pytest.raises(DimensionMismatch):
        network.train_batch(dataset, max_epochs=2, target_error=0.0)
    after = network.state_dict()
    assert all(np.array_equal(before[k], after[k]) for k in before)


def test_empty_dataset_and_epoch_budget_are_rejected():
    network = Network([1, 1], 0.1, seed=0)
    with pytest.raises(ValueError):
        network.train_batch([], max_epochs=1, target_error=0.0)
    with pytest.raises(ValueError):
        network.train_batch(_identity_dataset(3), max_epochs=0, target_error=0.0)


def test_callbacks_and_progress_output(capsys):
    records = []

    class _Capture:
        def on_epoch(self, epoch, metrics):
            records.append((epoch, metrics["rms"]))

    plain = []
    network = Network([1, 3, 1], 0.05, seed=2, hidden_activation="tanh")
    report = network.train_batch(
        _sine_dataset(),
        max_epochs=5,
        target_error=0.0,
        report_interval=2,
        callbacks=[_Capture(), lambda epoch, metrics: plain.append(epoch)],
    )
    assert [epoch for epoch, _ in records] == [1, 2, 3, 4, 5]
    assert tuple(rms for _, rms in records) == report.error_history
    assert plain == [1, 2, 3, 4, 5]
    out = capsys.readouterr().out
    assert "Epoch: 1, Average Error:" in out
    assert "Epoch: 3, Average Error:" in out
    assert "Epoch: 5, Average Error:" in out
    assert "Epoch: 2, Average Error:" not in out


def test_early_stop_announces_convergence(capsys):
    network = Network([1, 1], learning_rate=0.5, seed=0)
    report = network.train_batch([([0.5], [0.5])] * 50, 50, 1e-3, report_interval=100)
    out = capsys.readouterr().out
    assert f"Target error reached at epoch {report.epochs_to_converge}" in out
