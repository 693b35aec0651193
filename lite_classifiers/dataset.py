# lite_classifiers/dataset.py
from __future__ import annotations

from typing import Any, Iterable, List, Mapping, Sequence, Tuple

from .errors import ConfigurationError


def make_dataset(inputs: Sequence[Any], outputs: Sequence[Any]) -> List[dict]:
    """Pair inputs with labels in the {"input", "output"} shape the classifiers consume."""
    if len(inputs) != len(outputs):
        raise ConfigurationError(
            f"inputs and outputs differ in length ({len(inputs)} != {len(outputs)})"
        )
    return [{"input": x, "output": y} for x, y in zip(inputs, outputs)]


def split_dataset(dataset: Iterable[Any]) -> Tuple[list, list]:
    """
    Inverse of make_dataset. Accepts {"input", "output"} mappings or
    (input, output) pairs.
    """
    inputs, outputs = [], []
    for sample in dataset:
        if isinstance(sample, Mapping):
            try:
                inputs.append(sample["input"])
                outputs.append(sample["output"])
            except KeyError as exc:
                raise ConfigurationError(f"sample is missing {exc.args[0]!r}") from exc
        else:
            try:
                x, y = sample
            except (TypeError, ValueError) as exc:
                raise ConfigurationError(f"cannot read sample {sample!r}") from exc
            inputs.append(x)
            outputs.append(y)

    if not inputs:
        raise ConfigurationError("training set is empty")
    return inputs, outputs
