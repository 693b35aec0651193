# tests/conftest.py
from __future__ import annotations

import pytest


class ScriptedRandom:
    """
    Stand-in random source: replays `values` for integers(low, high)
    and records every call.
    """

    def __init__(self, values):
        self.values = list(values)
        self.calls = []

    def integers(self, low, high):
        self.calls.append((low, high))
        value = self.values[(len(self.calls) - 1) % len(self.values)]
        assert low <= value < high
        return value


@pytest.fixture
def scripted_random():
    return ScriptedRandom


@pytest.fixture
def separable_2d():
    """Positives at x >= 2, negatives at x <= -2."""
    data = [
        [2.0, 1.0], [3.0, 2.0], [2.5, -1.0], [4.0, 0.0],
        [-2.0, 1.0], [-3.0, -2.0], [-2.5, -1.0], [-4.0, 0.5],
    ]
    labels = [1, 1, 1, 1, -1, -1, -1, -1]
    return data, labels


@pytest.fixture
def xor_2d():
    data = [[0.0, 0.0], [1.0, 1.0], [0.0, 1.0], [1.0, 0.0]]
    labels = [-1, -1, 1, 1]
    return data, labels


@pytest.fixture
def three_blobs():
    """Three classes, each linearly separable from the other two."""
    inputs = [
        [3.0, 0.0], [4.0, 0.5], [3.5, -0.5],
        [-3.0, 0.0], [-4.0, 0.5], [-3.5, -0.5],
        [0.0, 3.0], [0.5, 4.0], [-0.5, 3.5],
    ]
    outputs = ["east"] * 3 + ["west"] * 3 + ["north"] * 3
    return inputs, outputs


@pytest.fixture
def tiny_corpus():
    texts = [
        "great movie loved it",
        "wonderful acting great plot",
        "loved the wonderful story",
        "terrible movie hated it",
        "awful acting boring plot",
        "hated the boring story",
    ]
    labels = [1, 1, 1, 0, 0, 0]
    return texts, labels
