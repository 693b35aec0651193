# lite_classifiers/winnow.py
"""
Winnow: a mistake-driven online learner with multiplicative updates.

Every feature carries a positive and a negative weight; the score of a
sample is sum(value * (positive - negative)) - threshold. When the score is
on the wrong side of +/- margin, weights of the present features are
promoted or demoted multiplicatively.

Note: `train_online`, `train_batch` and `classify` rewrite the caller's
feature mappings in place (bias injection, unknown-feature removal and
normalization). Pass a copy if the original mapping is still needed.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, Hashable, List, Mapping, MutableMapping, Optional

from .dataset import split_dataset
from .errors import ConfigurationError, NumericalInstabilityError, SerializationError
from .options import config_from_options
from .weights import (WeightStore, add_into, as_plain_dict, check_weight,
                      normalize_sum_of_values_to_1)

BIAS_FEATURE = "bias"


@dataclass(frozen=True)
class WinnowConfig:
    default_positive_weight: float = 2.0
    default_negative_weight: float = 1.0
    do_averaging: bool = False
    threshold: float = 1.0
    promotion: float = 1.5
    demotion: float = 0.5
    margin: float = 1.0
    retrain_count: int = 0
    bias: float = 1.0
    detailed_explanations: bool = False
    debug: bool = False

    def __post_init__(self):
        for name in ("default_positive_weight", "default_negative_weight",
                     "promotion", "demotion"):
            value = getattr(self, name)
            if not (math.isfinite(value) and value > 0):
                raise ConfigurationError(f"{name} must be a positive finite number, got {value!r}")
        if self.margin < 0:
            raise ConfigurationError(f"margin must be >= 0, got {self.margin!r}")
        if self.retrain_count < 0:
            raise ConfigurationError(f"retrain_count must be >= 0, got {self.retrain_count!r}")

    @classmethod
    def from_options(cls, options: Mapping[str, Any]) -> "WinnowConfig":
        return config_from_options(cls, options)


class Winnow:
    """
    Parameters
    ----------
    config : WinnowConfig
        Learner options (default: WinnowConfig()).
    """

    def __init__(self, config: Optional[WinnowConfig] = None):
        self.config = config if config is not None else WinnowConfig()
        self.positive_weights = WeightStore(self.config.default_positive_weight)
        self.negative_weights = WeightStore(self.config.default_negative_weight)
        self.positive_weights_sum: Dict[Hashable, float] = {}
        self.negative_weights_sum: Dict[Hashable, float] = {}

    # ------------------------------------------------------------------
    # Preprocessing
    # ------------------------------------------------------------------

    def edit_feature_values(self, features: MutableMapping[Hashable, float],
                            remove_unknown_features: bool) -> MutableMapping[Hashable, float]:
        if self.config.bias and BIAS_FEATURE not in features:
            features[BIAS_FEATURE] = 1.0
        if remove_unknown_features:
            for feature in [f for f in features if f not in self.positive_weights]:
                del features[feature]
        normalize_sum_of_values_to_1(features)
        return features

    # ------------------------------------------------------------------
    # Scoring
    # ------------------------------------------------------------------

    def perceive_features(self, features: Mapping[Hashable, float], continuous_output: bool,
                          positive_weights: Mapping[Hashable, float],
                          negative_weights: Mapping[Hashable, float],
                          explain: int = 0):
        score = 0.0
        explanations: List[Dict[str, Any]] = []
        for feature, value in features.items():
            if feature not in positive_weights:
                continue
            positive_weight = positive_weights[feature]
            negative_weight = negative_weights.get(feature, 0.0)
            relevance = value * (positive_weight - negative_weight)
            if not math.isfinite(relevance):
                raise NumericalInstabilityError(
                    f"relevance of feature {feature!r} is {relevance!r} "
                    f"(value={value!r}, weights={positive_weight!r}/{negative_weight!r})"
                )
            score += relevance
            if explain > 0:
                explanations.append({
                    "feature": feature,
                    "value": value,
                    "relevance": relevance,
                    "positive_weight": positive_weight,
                    "negative_weight": negative_weight,
                })

        score -= self.config.threshold
        if not math.isfinite(score):
            raise NumericalInstabilityError(f"score is {score!r}")

        classification = score if continuous_output else (1 if score > 0 else 0)
        if explain <= 0:
            return classification

        explanations.sort(key=lambda e: abs(e["relevance"]), reverse=True)
        explanations = explanations[:explain]
        if not self.config.detailed_explanations:
            explanations = [f"{e['feature']}{e['relevance']:+.2f}" for e in explanations]
        return {"classification": classification, "explanation": explanations}

    # ------------------------------------------------------------------
    # Training
    # ------------------------------------------------------------------

    def train_features(self, features: Mapping[Hashable, float], expected) -> bool:
        """One update step on already-edited features.

        Returns True when the sample was handled confidently (no adjustment).
        """
        cfg = self.config
        self.positive_weights.ensure(features)
        self.negative_weights.ensure(features)

        score = self.perceive_features(features, True, self.positive_weights, self.negative_weights)

        if (expected and score <= cfg.margin) or (not expected and score >= -cfg.margin):
            if expected:
                up, down = self.positive_weights, self.negative_weights
            else:
                up, down = self.negative_weights, self.positive_weights
            # all new weights are checked before any is stored
            staged = {
                feature: (check_weight(feature, up[feature] * cfg.promotion * (1 + value)),
                          check_weight(feature, down[feature] * cfg.demotion * (1 - value)))
                for feature, value in features.items()
            }
            for feature, (up_weight, down_weight) in staged.items():
                up[feature] = up_weight
                down[feature] = down_weight
            if cfg.debug:
                print(f"  Winnow: score={score:+.4f} expected={int(bool(expected))} "
                      f"-> adjusted {len(features)} feature(s)")
            return False

        if cfg.do_averaging:
            add_into(self.positive_weights_sum, self.positive_weights)
            add_into(self.negative_weights_sum, self.negative_weights)
        return True

    def train_online(self, features: MutableMapping[Hashable, float], expected) -> bool:
        self.edit_feature_values(features, remove_unknown_features=False)
        return self.train_features(features, expected)

    def train_batch(self, dataset) -> None:
        """(retrain_count + 1) in-order passes over the dataset; weights carry across passes."""
        inputs, outputs = split_dataset(dataset)
        for features in inputs:
            self.edit_feature_values(features, remove_unknown_features=False)

        for _ in range(self.config.retrain_count + 1):
            for features, expected in zip(inputs, outputs):
                self.train_features(features, expected)

    # ------------------------------------------------------------------
    # Classification
    # ------------------------------------------------------------------

    def classify(self, features: MutableMapping[Hashable, float], explain: int = 0,
                 continuous_output: bool = False):
        self.edit_feature_values(features, remove_unknown_features=True)
        if self.config.do_averaging:
            return self.perceive_features(features, continuous_output,
                                          self.positive_weights_sum, self.negative_weights_sum,
                                          explain)
        return self.perceive_features(features, continuous_output,
                                      self.positive_weights, self.negative_weights, explain)

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_json(self) -> Dict[str, Any]:
        return {
            "positive_weights": as_plain_dict(self.positive_weights),
            "negative_weights": as_plain_dict(self.negative_weights),
            "positive_weights_sum": as_plain_dict(self.positive_weights_sum),
            "negative_weights_sum": as_plain_dict(self.negative_weights_sum),
        }

    @classmethod
    def from_json(cls, snapshot: Mapping[str, Any], config: Optional[WinnowConfig] = None) -> "Winnow":
        for key in ("positive_weights", "negative_weights"):
            if not isinstance(snapshot.get(key), Mapping):
                raise SerializationError(f"Winnow snapshot has no {key!r} mapping")

        model = cls(config)
        model.positive_weights.update(snapshot["positive_weights"])
        model.negative_weights.update(snapshot["negative_weights"])
        model.positive_weights_sum = dict(snapshot.get("positive_weights_sum") or {})
        model.negative_weights_sum = dict(snapshot.get("negative_weights_sum") or {})
        return model
