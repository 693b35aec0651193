# lite_classifiers/errors.py
from __future__ import annotations


class ClassifierError(RuntimeError):
    """Base class for every error raised by the toolkit."""


class ConfigurationError(ClassifierError, ValueError):
    """
    Invalid option or training input (empty dataset, ragged vectors, bad labels).
    Raised before any model state is touched.
    """


class UnsupportedOperationError(ClassifierError, NotImplementedError):
    """The engine cannot perform the requested operation (e.g. online SVM training)."""


class NumericalInstabilityError(ClassifierError, ArithmeticError):
    """A weight or score left the finite, strictly positive range."""


class SerializationError(ClassifierError):
    """A model snapshot cannot be written or read back."""
