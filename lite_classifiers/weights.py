# lite_classifiers/weights.py
"""Helpers for sparse feature mappings and per-feature weight tables."""
from __future__ import annotations

import math
from typing import Dict, Hashable, Iterable, Mapping, MutableMapping, Optional

from .errors import NumericalInstabilityError


class WeightStore(dict):
    """
    feature -> weight mapping whose unseen features take `default`
    on first sight. Reading through `get_or_insert` mutates the store.
    """

    def __init__(self, default: float, weights: Optional[Mapping[Hashable, float]] = None):
        super().__init__(weights or {})
        self.default = float(default)

    def get_or_insert(self, feature: Hashable) -> float:
        if feature not in self:
            self[feature] = self.default
        return self[feature]

    def ensure(self, features: Iterable[Hashable]) -> None:
        for feature in features:
            self.get_or_insert(feature)


def normalize_sum_of_values_to_1(features: MutableMapping[Hashable, float]) -> None:
    """Rescale in place so that sum(|value|) == 1. All-zero mappings are left alone."""
    total = sum(abs(value) for value in features.values())
    if total != 0:
        for feature in features:
            features[feature] /= total


def add_into(target: MutableMapping[Hashable, float], source: Mapping[Hashable, float]) -> None:
    for feature, value in source.items():
        target[feature] = target.get(feature, 0.0) + value


def check_weight(feature: Hashable, weight: float) -> float:
    if not math.isfinite(weight) or weight <= 0:
        raise NumericalInstabilityError(
            f"weight of feature {feature!r} left the positive finite range: {weight!r}"
        )
    return weight


def as_plain_dict(weights: Mapping[Hashable, float]) -> Dict[Hashable, float]:
    return {feature: float(value) for feature, value in weights.items()}
