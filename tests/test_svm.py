# tests/test_svm.py
from __future__ import annotations

import json

import numpy as np
import pytest

from lite_classifiers.errors import (ConfigurationError, SerializationError,
                                     UnsupportedOperationError)
from lite_classifiers.kernels import CustomKernel, LinearKernel, RBFKernel
from lite_classifiers.svm import SVM, SVMConfig, SvmClassifier


# =============================================================================
# Training
# =============================================================================

def test_linear_kernel_separates_training_set(separable_2d):
    data, labels = separable_2d
    svm = SVM(SVMConfig(maxiter=10000, numpasses=10), random_state=0)

    stats = svm.train(data, labels)

    assert svm.predict(data) == labels
    assert svm.uses_weights
    assert svm.data is None
    assert 1 <= stats.iterations <= 10000
    assert stats.updates > 0


def test_exact_trace_with_scripted_random(scripted_random):
    rng = scripted_random([0])
    svm = SVM(SVMConfig(C=1.0), random_state=rng)
    trace = []

    stats = svm.train([[1.0], [-1.0]], [1, -1],
                      callback=lambda i, j, alpha: trace.append((i, j, alpha.tolist())))

    assert trace == [(0, 1, [0.5, 0.5])]
    assert rng.calls == [(0, 1)]
    # one sweep with an update, then ten quiet sweeps
    assert stats.iterations == 11
    assert stats.updates == 1
    assert svm.w.tolist() == [1.0]
    assert svm.b == 0.0
    assert svm.margin_one([2.0]) == 2.0


def test_bias_taken_from_first_index_when_only_it_is_unbound(scripted_random):
    rng = scripted_random([0])
    svm = SVM(SVMConfig(C=3.0, maxiter=1), random_state=rng)
    trace = []

    stats = svm.train([[1.0], [-1.0], [0.5]], [1, -1, -1],
                      callback=lambda i, j, alpha: trace.append((i, j, alpha.tolist())))

    assert rng.calls == [(0, 2), (0, 2)]
    assert trace == [(0, 1, [0.5, 0.5, 0.0]), (2, 0, [3.0, 0.5, 2.5])]
    assert stats.updates == 2
    # alpha_0 is clipped to C, alpha_2 ends strictly inside: b1 = -2.125, b2 = -1.25
    assert svm.b == pytest.approx(-2.125)
    assert svm.w.tolist() == pytest.approx([2.25])


def test_bias_taken_from_second_index_when_it_is_unbound(scripted_random):
    rng = scripted_random([1, 0, 0])
    svm = SVM(SVMConfig(C=3.0, maxiter=1), random_state=rng)
    trace = []

    stats = svm.train([[1.0], [0.5], [-1.0]], [1, -1, -1],
                      callback=lambda i, j, alpha: trace.append((i, j, alpha.tolist())))

    assert rng.calls == [(0, 2), (0, 2), (0, 2)]
    assert trace == [
        (0, 2, [0.5, 0.0, 0.5]),
        (1, 0, [3.0, 2.5, 0.5]),
        (2, 0, [2.5, 2.5, 0.0]),
    ]
    assert stats.iterations == 1
    assert stats.updates == 3
    # last pair: alpha_2 drops to 0, alpha_0 = 2.5 is inside: b1 = 0.25, b2 = -0.25
    assert svm.b == pytest.approx(-0.25)
    assert svm.w.tolist() == pytest.approx([1.25])


def test_second_index_is_never_the_first(scripted_random):
    svm = SVM(random_state=scripted_random([0, 1, 2]))
    assert [svm._pick_second(0, 4) for _ in range(3)] == [1, 2, 3]
    assert [svm._pick_second(2, 4) for _ in range(3)] == [0, 1, 3]


def test_alpha_stays_in_box_and_equality_constraint_holds():
    rng = np.random.default_rng(7)
    pos = rng.normal(loc=0.5, scale=1.0, size=(15, 2))
    neg = rng.normal(loc=-0.5, scale=1.0, size=(15, 2))
    data = np.vstack([pos, neg]).tolist()
    labels = [1] * 15 + [-1] * 15
    y = np.asarray(labels, dtype=float)
    C = 0.3

    snapshots = []
    svm = SVM(SVMConfig(C=C, kernel="rbf", rbfsigma=1.0), random_state=3)
    svm.train(data, labels, callback=lambda i, j, alpha: snapshots.append(alpha))

    assert snapshots
    for alpha in snapshots:
        assert np.all(alpha >= 0.0)
        assert np.all(alpha <= C)
        assert float(alpha @ y) == pytest.approx(0.0, abs=1e-9)


def test_rbf_solves_xor(xor_2d):
    data, labels = xor_2d
    svm = SVM(SVMConfig(C=10.0, kernel="rbf", rbfsigma=0.5), random_state=1)

    stats = svm.train(data, labels)

    assert svm.predict(data) == labels
    assert not svm.uses_weights
    assert svm.N == stats.support_vectors == len(svm.data)
    assert np.all(svm.alpha > svm.config.alphatol)


def test_maxiter_caps_outer_sweeps(separable_2d):
    data, labels = separable_2d
    stats = SVM(SVMConfig(maxiter=1), random_state=0).train(data, labels)
    assert stats.iterations == 1


def test_custom_kernel_keeps_support_vectors(separable_2d):
    data, labels = separable_2d
    config = SVMConfig(kernel=lambda u, v: float(np.dot(u, v)))
    svm = SVM(config, random_state=0)

    svm.train(data, labels)

    assert isinstance(svm.kernel, CustomKernel)
    assert not svm.uses_weights
    assert svm.predict(data) == labels


@pytest.mark.parametrize(
    "data, labels, match",
    [
        ([], [], "empty"),
        ([[1.0], [2.0]], [1], "differ in length"),
        ([[1.0, 2.0], [1.0]], [1, -1], "different lengths"),
        ([[1.0], [2.0]], [1, 0], "labels"),
        ([[1.0], [float("nan")]], [1, -1], "NaN"),
    ],
)
def test_invalid_training_input_fails_before_mutation(data, labels, match):
    svm = SVM()
    with pytest.raises(ConfigurationError, match=match):
        svm.train(data, labels)
    assert not svm.is_trained


def test_predict_before_training_raises():
    with pytest.raises(ConfigurationError):
        SVM().margin_one([1.0, 2.0])


def test_margin_checks_dimension(separable_2d):
    data, labels = separable_2d
    svm = SVM(random_state=0)
    svm.train(data, labels)
    with pytest.raises(ConfigurationError):
        svm.margin_one([1.0, 2.0, 3.0])


def test_batch_helpers_preserve_order(separable_2d):
    data, labels = separable_2d
    svm = SVM(random_state=0)
    svm.train(data, labels)

    margins = svm.margins(data)
    assert margins == [svm.margin_one(x) for x in data]
    assert svm.predict(data) == [1 if m > 0 else -1 for m in margins]


# =============================================================================
# Configuration
# =============================================================================

@pytest.mark.parametrize(
    "options",
    [
        {"C": 0},
        {"C": -1.0},
        {"tol": -1e-3},
        {"maxiter": 0},
        {"numpasses": 0},
        {"kernel": "poly"},
        {"kernel": "rbf", "rbfsigma": 0.0},
        {"rbfsigma": -1.0},
    ],
)
def test_invalid_config(options):
    with pytest.raises(ConfigurationError):
        SVMConfig(**options)


def test_from_options_rejects_unknown_keys():
    assert SVMConfig.from_options({"C": 2.0}).C == 2.0
    with pytest.raises(ConfigurationError, match="gamma"):
        SVMConfig.from_options({"gamma": 0.1})


def test_kernel_resolution():
    assert isinstance(SVMConfig().build_kernel(), LinearKernel)
    kernel = SVMConfig(kernel="rbf", rbfsigma=2.0).build_kernel()
    assert kernel == RBFKernel(sigma=2.0)


# =============================================================================
# Serialization
# =============================================================================

def test_linear_round_trip(separable_2d):
    data, labels = separable_2d
    svm = SVM(random_state=0)
    svm.train(data, labels)

    snapshot = json.loads(json.dumps(svm.to_json()))
    assert snapshot["kernelType"] == "linear"
    assert "w" in snapshot and "data" not in snapshot

    restored = SVM.from_json(snapshot)
    held_out = [[1.0, 5.0], [-1.0, -5.0], [0.3, 0.3], [-0.2, 9.0]]
    assert restored.margins(held_out) == pytest.approx(svm.margins(held_out))
    assert restored.predict(held_out) == svm.predict(held_out)


def test_rbf_round_trip(xor_2d):
    data, labels = xor_2d
    svm = SVM(SVMConfig(C=10.0, kernel="rbf", rbfsigma=0.5), random_state=1)
    svm.train(data, labels)

    snapshot = json.loads(json.dumps(svm.to_json()))
    assert snapshot["kernelType"] == "rbf"
    assert snapshot["rbfSigma"] == 0.5
    assert len(snapshot["data"]) == len(snapshot["labels"]) == len(snapshot["alpha"])

    restored = SVM.from_json(snapshot)
    held_out = [[0.1, 0.1], [0.9, 0.1], [0.1, 0.9], [0.8, 0.8]]
    assert restored.predict(held_out) == svm.predict(held_out)
    assert restored.margins(held_out) == pytest.approx(svm.margins(held_out))


def test_custom_kernel_refuses_export(separable_2d):
    data, labels = separable_2d
    svm = SVM(SVMConfig(kernel=lambda u, v: float(np.dot(u, v))), random_state=0)
    svm.train(data, labels)
    with pytest.raises(SerializationError):
        svm.to_json()


def test_unknown_kernel_type_on_import():
    with pytest.raises(SerializationError, match="kernelType"):
        SVM.from_json({"N": 1, "D": 1, "b": 0.0, "kernelType": "sigmoid"})


def test_missing_field_on_import():
    with pytest.raises(SerializationError, match="'w'"):
        SVM.from_json({"N": 1, "D": 1, "b": 0.0, "kernelType": "linear"})


# =============================================================================
# Classifier contract
# =============================================================================

def test_classifier_accepts_zero_one_labels(separable_2d):
    data, labels = separable_2d
    dataset = [{"input": x, "output": 1 if y > 0 else 0} for x, y in zip(data, labels)]
    classifier = SvmClassifier(random_state=0)

    classifier.train_batch(dataset)

    assert [classifier.classify(x) for x in data] == [1 if y > 0 else 0 for y in labels]
    assert classifier.classify(data[0], continuous_output=True) == classifier.base.margin_one(data[0])


def test_classifier_rejects_online_training():
    with pytest.raises(UnsupportedOperationError):
        SvmClassifier().train_online([1.0, 2.0], 1)


def test_linear_explanations_sorted_and_truncated():
    classifier = SvmClassifier(random_state=0)
    classifier.train_batch([([1.0, 0.0, 0.0], 1), ([-1.0, 0.0, 0.0], 0)])
    classifier.base.w = np.array([0.5, -2.0, 3.0])

    result = classifier.classify([1.0, 1.0, 1.0], explain=2)

    assert result["classification"] in (0, 1)
    assert [e["index"] for e in result["explanation"]] == [2, 0]
    assert result["explanation"][0] == {
        "index": 2, "value": 1.0, "weight": 3.0, "relevance": 3.0,
    }

    everything = classifier.classify([1.0, 1.0, 1.0], explain=10)["explanation"]
    assert len(everything) == 3


def test_support_vector_mode_has_no_explanations(xor_2d):
    data, labels = xor_2d
    classifier = SvmClassifier(SVMConfig(C=10.0, kernel="rbf"), random_state=1)
    classifier.train_batch(list(zip(data, labels)))

    result = classifier.classify(data[0], explain=3)
    assert result["explanation"] == []


def test_classifier_round_trip(separable_2d):
    data, labels = separable_2d
    classifier = SvmClassifier(random_state=0)
    classifier.train_batch(list(zip(data, labels)))

    restored = SvmClassifier.from_json(json.loads(json.dumps(classifier.to_json())))
    assert [restored.classify(x) for x in data] == [classifier.classify(x) for x in data]
