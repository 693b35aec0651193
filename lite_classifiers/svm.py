# lite_classifiers/svm.py
"""
Kernel SVM trained with Sequential Minimal Optimization (SMO).

`SVM` is the solver: it optimizes the dual two coefficients at a time,
then either folds the result into a dense weight vector (linear kernel)
or keeps only the support vectors (any other kernel).

`SvmClassifier` wraps the solver in the toolkit's classifier contract
(train_batch / train_online / classify / to_json / from_json).
"""
from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

import numpy as np

from .dataset import split_dataset
from .errors import ConfigurationError, SerializationError, UnsupportedOperationError
from .kernels import Kernel, kernel_from_json, kernel_from_option
from .options import config_from_options

# Minimum change / box width for a pair update to count.
PAIR_EPS = 1e-4


@dataclass(frozen=True)
class SVMConfig:
    C: float = 1.0
    tol: float = 1e-4
    alphatol: float = 1e-7
    maxiter: int = 10000
    numpasses: int = 10
    kernel: Any = "linear"
    rbfsigma: float = 0.5
    verbose: bool = False

    def __post_init__(self):
        if not self.C > 0:
            raise ConfigurationError(f"C must be > 0, got {self.C!r}")
        if self.tol < 0 or self.alphatol < 0:
            raise ConfigurationError("tol and alphatol must be non-negative")
        if self.maxiter < 1 or self.numpasses < 1:
            raise ConfigurationError("maxiter and numpasses must be >= 1")
        if not self.rbfsigma > 0:
            raise ConfigurationError(f"rbfsigma must be > 0, got {self.rbfsigma!r}")
        # resolves (and so validates) the kernel option
        self.build_kernel()

    def build_kernel(self) -> Kernel:
        return kernel_from_option(self.kernel, self.rbfsigma)

    @classmethod
    def from_options(cls, options: Mapping[str, Any]) -> "SVMConfig":
        """Build a config from a loose option mapping, rejecting unknown keys."""
        return config_from_options(cls, options)


@dataclass(frozen=True)
class TrainingStats:
    iterations: int
    updates: int
    support_vectors: int


def _as_random_source(random_state):
    """
    Int seed / None -> numpy Generator. Anything else must expose
    `integers(low, high)` (a numpy Generator, or a scripted stand-in in tests).
    """
    if random_state is None or isinstance(random_state, (int, np.integer)):
        return np.random.default_rng(random_state)
    if hasattr(random_state, "integers"):
        return random_state
    raise ConfigurationError(
        f"random_state must be an int, None or expose integers(), got {type(random_state).__name__}"
    )


def _validate_training_set(data, labels):
    if len(data) == 0:
        raise ConfigurationError("training set is empty")
    if len(data) != len(labels):
        raise ConfigurationError(
            f"data and labels differ in length ({len(data)} != {len(labels)})"
        )

    dims = {len(row) for row in data}
    if len(dims) != 1:
        raise ConfigurationError(f"training vectors have different lengths: {sorted(dims)}")

    X = np.asarray(data, dtype=float)
    if X.ndim != 2 or X.shape[1] == 0:
        raise ConfigurationError("training vectors must be non-empty sequences of numbers")
    if not np.all(np.isfinite(X)):
        raise ConfigurationError("training vectors contain NaN or infinite values")

    y = np.asarray(labels, dtype=float)
    if not np.all(np.isin(y, (-1.0, 1.0))):
        raise ConfigurationError("labels must be +1 or -1")
    return X, y


class SVM:
    """
    Binary kernel SVM solved by SMO.

    Parameters
    ----------
    config : SVMConfig
        Solver options (default: SVMConfig()).
    random_state : int, numpy Generator, or object with integers(low, high)
        Source for the random choice of the second index in each pair.
        Seed it for reproducible runs.

    Attributes
    ----------
    N, D : int
        Number of retained samples and their dimension.
    b : float
        Bias term.
    w : np.ndarray or None
        Dense weights, set after training with the linear kernel.
    data, labels, alpha : np.ndarray or None
        Support vectors, their labels and dual coefficients (non-linear kernels).
    """

    def __init__(self, config: Optional[SVMConfig] = None, random_state=None):
        self.config = config if config is not None else SVMConfig()
        self.kernel: Kernel = self.config.build_kernel()
        self._rng = _as_random_source(random_state)

        self.N = 0
        self.D = 0
        self.b = 0.0
        self.w: Optional[np.ndarray] = None
        self.data: Optional[np.ndarray] = None
        self.labels: Optional[np.ndarray] = None
        self.alpha: Optional[np.ndarray] = None

    @property
    def is_trained(self) -> bool:
        return self.w is not None or self.data is not None

    @property
    def uses_weights(self) -> bool:
        return self.w is not None

    # ------------------------------------------------------------------
    # Training
    # ------------------------------------------------------------------

    def _pick_second(self, i: int, n: int) -> int:
        j = int(self._rng.integers(0, n - 1))
        return j + 1 if j >= i else j

    def train(
        self,
        data: Sequence[Sequence[float]],
        labels: Sequence[int],
        callback: Optional[Callable[[int, int, np.ndarray], None]] = None,
    ) -> TrainingStats:
        """Run SMO over the full batch.

        Parameters
        ----------
        data : sequence of equal-length numeric vectors
        labels : sequence of +1 / -1
        callback : callable(i, j, alpha), optional
            Called after every accepted pair update with a copy of alpha.

        Returns
        -------
        TrainingStats
            `iterations` counts outer sweeps over the data.
        """
        X, y = _validate_training_set(data, labels)
        cfg = self.config
        C = cfg.C
        n, d = X.shape

        K = self.kernel.gram(X)
        alpha = np.zeros(n, dtype=float)
        b = 0.0

        iters = 0
        passes = 0
        updates = 0
        while passes < cfg.numpasses and iters < cfg.maxiter:
            changed = 0
            for i in range(n):
                Ei = b + float((alpha * y) @ K[:, i]) - y[i]
                violates = (y[i] * Ei < -cfg.tol and alpha[i] < C) or (
                    y[i] * Ei > cfg.tol and alpha[i] > 0
                )
                if not violates or n < 2:
                    continue

                j = self._pick_second(i, n)
                Ej = b + float((alpha * y) @ K[:, j]) - y[j]

                ai, aj = alpha[i], alpha[j]
                if y[i] == y[j]:
                    L = max(0.0, ai + aj - C)
                    H = min(C, ai + aj)
                else:
                    L = max(0.0, aj - ai)
                    H = min(C, C + aj - ai)
                if abs(L - H) < PAIR_EPS:
                    continue

                eta = 2.0 * K[i, j] - K[i, i] - K[j, j]
                if eta >= 0:
                    continue

                new_aj = aj - y[j] * (Ei - Ej) / eta
                new_aj = min(max(new_aj, L), H)
                if abs(aj - new_aj) < PAIR_EPS:
                    continue
                # the clip only absorbs rounding noise; [L, H] already keeps alpha_i in the box
                new_ai = min(max(ai + y[i] * y[j] * (aj - new_aj), 0.0), C)
                alpha[i] = new_ai
                alpha[j] = new_aj

                b1 = b - Ei - y[i] * (new_ai - ai) * K[i, i] - y[j] * (new_aj - aj) * K[i, j]
                b2 = b - Ej - y[i] * (new_ai - ai) * K[i, j] - y[j] * (new_aj - aj) * K[j, j]
                b = 0.5 * (b1 + b2)
                if 0 < new_ai < C:
                    b = b1
                if 0 < new_aj < C:
                    b = b2

                changed += 1
                if callback is not None:
                    callback(i, j, alpha.copy())

            iters += 1
            updates += changed
            passes = passes + 1 if changed == 0 else 0

        self.D = d
        self.b = float(b)
        support = alpha > cfg.alphatol
        n_support = int(np.count_nonzero(support))

        if self.kernel.kind == "linear":
            self.N = n
            self.w = (alpha * y) @ X
            self.data = self.labels = self.alpha = None
        else:
            self.N = n_support
            self.w = None
            self.data = X[support]
            self.labels = y[support]
            self.alpha = alpha[support]

        if cfg.verbose:
            print(f"  SMO [{self.kernel.kind}]: {iters} sweeps, {updates} updates, "
                  f"{n_support}/{n} support vectors")

        return TrainingStats(iterations=iters, updates=updates, support_vectors=n_support)

    # ------------------------------------------------------------------
    # Prediction
    # ------------------------------------------------------------------

    def margin_one(self, instance: Sequence[float]) -> float:
        """Decision value b + w.x, or b + sum(alpha_i y_i k(x, x_i))."""
        if not self.is_trained:
            raise ConfigurationError("SVM has not been trained")

        x = np.asarray(instance, dtype=float)
        if x.shape != (self.D,):
            raise ConfigurationError(f"expected a vector of length {self.D}, got shape {x.shape}")

        if self.w is not None:
            return self.b + float(x @ self.w)

        ks = np.array([self.kernel(x, sv) for sv in self.data], dtype=float)
        return self.b + float((self.alpha * self.labels) @ ks)

    def predict_one(self, instance: Sequence[float]) -> int:
        return 1 if self.margin_one(instance) > 0 else -1

    def margins(self, instances: Sequence[Sequence[float]]) -> List[float]:
        return [self.margin_one(x) for x in instances]

    def predict(self, instances: Sequence[Sequence[float]]) -> List[int]:
        return [self.predict_one(x) for x in instances]

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_json(self) -> Dict[str, Any]:
        if not self.is_trained:
            raise SerializationError("cannot serialize an untrained SVM")

        # raises SerializationError for custom kernels
        snapshot: Dict[str, Any] = self.kernel.to_json()
        snapshot.update(N=self.N, D=self.D, b=self.b)
        if self.w is not None:
            snapshot["w"] = self.w.tolist()
        else:
            snapshot["data"] = self.data.tolist()
            snapshot["labels"] = self.labels.tolist()
            snapshot["alpha"] = self.alpha.tolist()
        return snapshot

    @classmethod
    def from_json(
        cls,
        snapshot: Mapping[str, Any],
        config: Optional[SVMConfig] = None,
        random_state=None,
    ) -> "SVM":
        kernel = kernel_from_json(snapshot)
        base = config if config is not None else SVMConfig()
        model = cls(dataclasses.replace(base, kernel=kernel), random_state=random_state)

        try:
            model.N = int(snapshot["N"])
            model.D = int(snapshot["D"])
            model.b = float(snapshot["b"])
            if kernel.kind == "linear":
                model.w = np.asarray(snapshot["w"], dtype=float)
            else:
                model.data = np.asarray(snapshot["data"], dtype=float).reshape(-1, model.D)
                model.labels = np.asarray(snapshot["labels"], dtype=float)
                model.alpha = np.asarray(snapshot["alpha"], dtype=float)
        except KeyError as exc:
            raise SerializationError(f"SVM snapshot is missing {exc.args[0]!r}") from exc

        if model.w is not None and model.w.shape != (model.D,):
            raise SerializationError("weight vector length does not match D")
        if model.data is not None and not (
            len(model.data) == len(model.labels) == len(model.alpha)
        ):
            raise SerializationError("support vector arrays differ in length")
        return model


class SvmClassifier:
    """
    Binary classifier contract around `SVM`.

    Labels are read as `output > 0 -> +1, else -1`, so {0, 1} and {-1, +1}
    datasets both work; `classify` answers 1 / 0.
    """

    def __init__(self, config: Optional[SVMConfig] = None, random_state=None):
        self.config = config if config is not None else SVMConfig()
        self.random_state = random_state
        self.base = SVM(self.config, random_state=random_state)

    def train_batch(self, dataset) -> TrainingStats:
        inputs, outputs = split_dataset(dataset)
        labels = [1 if output > 0 else -1 for output in outputs]
        return self.base.train(inputs, labels)

    def train_online(self, sample, label):
        raise UnsupportedOperationError("SVM training needs the full batch; use train_batch")

    def classify(self, features, explain: int = 0, continuous_output: bool = False):
        score = self.base.margin_one(features)
        classification = score if continuous_output else (1 if score > 0 else 0)
        if explain > 0:
            return {
                "classification": classification,
                "explanation": self.explain(features, explain),
            }
        return classification

    def explain(self, features, count: int) -> List[Dict[str, Any]]:
        """Per-feature contribution records {index, value, weight, relevance}.

        Only defined with dense weights; support-vector models explain nothing.
        """
        if not self.base.uses_weights:
            return []
        w = self.base.w
        records = [
            {
                "index": index,
                "value": float(value),
                "weight": float(w[index]),
                "relevance": float(value) * float(w[index]),
            }
            for index, value in enumerate(features)
        ]
        records.sort(key=lambda r: r["relevance"], reverse=True)
        return records[:count]

    def to_json(self) -> Dict[str, Any]:
        return self.base.to_json()

    @classmethod
    def from_json(cls, snapshot: Mapping[str, Any], config: Optional[SVMConfig] = None) -> "SvmClassifier":
        classifier = cls(config)
        classifier.base = SVM.from_json(snapshot, config)
        classifier.config = classifier.base.config
        return classifier
