# lite_classifiers/kernels.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping

import numpy as np

from .errors import ConfigurationError, SerializationError


@dataclass(frozen=True)
class LinearKernel:
    """k(u, v) = u · v"""

    kind = "linear"

    def __call__(self, u, v) -> float:
        return float(np.dot(u, v))

    def gram(self, X: np.ndarray) -> np.ndarray:
        return X @ X.T

    def to_json(self) -> Dict[str, Any]:
        return {"kernelType": self.kind}


@dataclass(frozen=True)
class RBFKernel:
    """k(u, v) = exp(-||u - v||^2 / (2 sigma^2))"""

    sigma: float = 0.5
    kind = "rbf"

    def __post_init__(self):
        if not self.sigma > 0:
            raise ConfigurationError(f"rbfsigma must be > 0, got {self.sigma!r}")

    def __call__(self, u, v) -> float:
        diff = np.asarray(u, dtype=float) - np.asarray(v, dtype=float)
        return float(np.exp(-np.dot(diff, diff) / (2.0 * self.sigma ** 2)))

    def gram(self, X: np.ndarray) -> np.ndarray:
        sq = (X ** 2).sum(axis=1, keepdims=True)
        d2 = np.maximum(sq + sq.T - 2.0 * (X @ X.T), 0.0)
        return np.exp(-d2 / (2.0 * self.sigma ** 2))

    def to_json(self) -> Dict[str, Any]:
        return {"kernelType": self.kind, "rbfSigma": self.sigma}


@dataclass(frozen=True)
class CustomKernel:
    """Caller-supplied similarity function. Has no stable snapshot form."""

    function: Callable[[Any, Any], float]
    kind = "custom"

    def __call__(self, u, v) -> float:
        return float(self.function(u, v))

    def gram(self, X: np.ndarray) -> np.ndarray:
        n = X.shape[0]
        K = np.empty((n, n), dtype=float)
        for i in range(n):
            for j in range(i, n):
                K[i, j] = K[j, i] = self(X[i], X[j])
        return K

    def to_json(self) -> Dict[str, Any]:
        raise SerializationError("a model trained with a custom kernel cannot be serialized")


Kernel = LinearKernel | RBFKernel | CustomKernel


def kernel_from_option(kernel, rbfsigma: float = 0.5) -> Kernel:
    """Resolve the `kernel` configuration value into a kernel variant."""
    if isinstance(kernel, (LinearKernel, RBFKernel, CustomKernel)):
        return kernel
    if kernel == "linear":
        return LinearKernel()
    if kernel == "rbf":
        return RBFKernel(sigma=rbfsigma)
    if callable(kernel):
        return CustomKernel(kernel)
    raise ConfigurationError(
        f"kernel must be 'linear', 'rbf' or a callable, got {kernel!r}"
    )


def kernel_from_json(snapshot: Mapping[str, Any]) -> Kernel:
    kind = snapshot.get("kernelType")
    if kind == "linear":
        return LinearKernel()
    if kind == "rbf":
        if "rbfSigma" not in snapshot:
            raise SerializationError("rbf snapshot is missing 'rbfSigma'")
        try:
            return RBFKernel(sigma=float(snapshot["rbfSigma"]))
        except (TypeError, ValueError) as exc:
            raise SerializationError(f"invalid rbfSigma in snapshot: {exc}") from exc
    raise SerializationError(f"unrecognized kernelType: {kind!r}")
