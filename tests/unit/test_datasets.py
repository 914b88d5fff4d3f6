import numpy as np
import pytest

from backpropnet.core.types import Sample
from backpropnet.data import available_datasets, get_dataset, register_dataset
from backpropnet.data.loaders.conversion import KM_TO_MILES
from backpropnet.data.loaders.sin_exp import damped_sine
from backpropnet.data.registry import DatasetSpec, TaskCodec
from backpropnet.data.utils import as_samples, holdout_split, stack


def test_builtin_datasets_registered():
    assert {"km_to_miles", "sin_exp"} <= set(available_datasets())
    with pytest.raises(KeyError):
        get_dataset("does-not-exist")


def test_conversion_dataset_is_normalised_identity():
    spec = get_dataset("km_to_miles", count=500, seed=42)
    inputs, targets = stack(spec.samples)
    assert inputs.shape == (500, 1) and targets.shape == (500, 1)
    assert np.all(inputs > 0) and np.all(inputs <= 1.0)
    assert np.allclose(inputs, targets)
    raw = inputs[:, 0] * 1000
    assert 0.2 < np.mean(raw < 10) < 0.4
    assert 0.03 < np.mean(raw >= 500) < 0.2
    assert spec.provenance["factor"] == KM_TO_MILES


def test_conversion_codec_round_trip():
    codec = get_dataset("km_to_miles", count=10).codec
    assert codec.normalize_input(250.0) == pytest.approx(0.25)
    assert codec.denormalize_output(0.25) == pytest.approx(250.0 * KM_TO_MILES)
    assert codec.reference(100.0) == pytest.approx(62.1371)
    assert codec.hidden_activation == "linear"


def test_sin_exp_dataset_shape_and_determinism():
    first = get_dataset("sin_exp", count=200, seed=1)
    second = get_dataset("sin_exp", count=200, seed=1)
    assert first.samples == second.samples
    inputs, targets = stack(first.samples)
    raw_x = inputs[:, 0] * 2.0
    assert raw_x.min() == pytest.approx(-2.0)
    assert raw_x.max() <= 2.0 + 1e-12
    assert np.allclose(targets[:, 0] * 0.9, damped_sine(raw_x))
    assert not np.all(np.diff(raw_x) >= 0), "samples should be shuffled"


def test_sin_exp_noise_is_bounded():
    clean = stack(get_dataset("sin_exp", count=100, seed=3).samples)
    noisy = stack(get_dataset("sin_exp", count=100, seed=3, noise=True).samples)
    assert not np.allclose(clean[1], noisy[1])
    assert np.max(np.abs(noisy[1] * 0.9 - damped_sine(noisy[0] * 2.0))) <= 0.005 + 1e-12


def test_register_dataset_decorator():
    codec = TaskCodec(lambda x: x, lambda y: y, lambda x: 2 * x)

    @register_dataset("doubling_fixture")
    def _make(count: int = 4, **_):
        xs = np.linspace(0, 1, count).reshape(-1, 1)
        return DatasetSpec("doubling_fixture", as_samples(xs, 2 * xs), codec)

    spec = get_dataset("doubling_fixture", count=3)
    assert len(spec) == 3
    assert spec.samples[-1] == Sample.of([1.0], [2.0])


def test_holdout_split_is_sequential():
    samples = [Sample.of([i], [i]) for i in range(10)]
    train, val = holdout_split(samples, train_fraction=0.8)
    assert train == samples[:8] and val == samples[8:]
    with pytest.raises(ValueError):
        holdout_split(samples, train_fraction=0.0)
