# lite_classifiers/multilabel.py
"""
One-vs-rest (binary relevance) decomposition over any binary classifier
that follows the toolkit contract.
"""
from __future__ import annotations

import copy
from typing import Any, Callable, Dict, Hashable, List, Mapping

from .dataset import split_dataset
from .errors import SerializationError


def _as_label_set(output) -> set:
    if isinstance(output, (list, tuple, set, frozenset)):
        return set(output)
    return {output}


class BinaryRelevance:
    """
    Parameters
    ----------
    binary_classifier_factory : callable
        Returns a fresh, untrained binary classifier (e.g.
        ``lambda: Winnow(WinnowConfig(retrain_count=2))``).
    """

    def __init__(self, binary_classifier_factory: Callable[[], Any]):
        self.factory = binary_classifier_factory
        self.classifiers_by_label: Dict[Hashable, Any] = {}

    @property
    def classes(self) -> List[Hashable]:
        return sorted(self.classifiers_by_label, key=str)

    def _classifier_for(self, label):
        if label not in self.classifiers_by_label:
            self.classifiers_by_label[label] = self.factory()
        return self.classifiers_by_label[label]

    def train_batch(self, dataset) -> None:
        inputs, outputs = split_dataset(dataset)
        label_sets = [_as_label_set(output) for output in outputs]
        all_labels = set().union(*label_sets)

        for label in sorted(all_labels, key=str):
            binary_dataset = [
                {"input": copy.deepcopy(x), "output": 1 if label in labels else 0}
                for x, labels in zip(inputs, label_sets)
            ]
            self._classifier_for(label).train_batch(binary_dataset)

    def train_online(self, sample, labels) -> None:
        label_set = _as_label_set(labels)
        for label in label_set:
            self._classifier_for(label)
        for label, classifier in self.classifiers_by_label.items():
            classifier.train_online(copy.deepcopy(sample), 1 if label in label_set else 0)

    def classify(self, sample, explain: int = 0, continuous_output: bool = False):
        """
        Returns the sorted list of labels classified as 1, or a
        {label: score} mapping with `continuous_output`. With `explain > 0`
        the result is {"classes": ..., "explanation": {label: explanation}}.
        """
        scores: Dict[Hashable, Any] = {}
        explanations: Dict[Hashable, Any] = {}
        for label in self.classes:
            classifier = self.classifiers_by_label[label]
            result = classifier.classify(copy.deepcopy(sample), explain, continuous_output)
            if explain > 0:
                explanations[label] = result["explanation"]
                result = result["classification"]
            scores[label] = result

        if continuous_output:
            classes: Any = scores
        else:
            classes = [label for label, value in scores.items() if value > 0]

        if explain > 0:
            return {"classes": classes, "explanation": explanations}
        return classes

    def to_json(self) -> Dict[str, Any]:
        return {
            "classes": [
                {"label": label, "model": self.classifiers_by_label[label].to_json()}
                for label in self.classes
            ]
        }

    @classmethod
    def from_json(cls, snapshot: Mapping[str, Any],
                  binary_classifier_factory: Callable[[], Any]) -> "BinaryRelevance":
        if "classes" not in snapshot:
            raise SerializationError("multi-label snapshot has no 'classes'")

        model = cls(binary_classifier_factory)
        for entry in snapshot["classes"]:
            template = binary_classifier_factory()
            restored = type(template).from_json(entry["model"], template.config)
            model.classifiers_by_label[entry["label"]] = restored
        return model
