"""
lite_classifiers
================
Interchangeable binary classifiers behind one training / prediction
contract, plus a one-vs-rest layer and text feature extraction.

Modules
-------
- kernels     : Linear / RBF / custom kernel variants
- svm         : Kernel SVM trained by SMO, and its classifier wrapper
- weights     : Weight tables and feature-map helpers
- winnow      : Winnow online learner with averaging and explanations
- multilabel  : One-vs-rest decomposition over any binary classifier
- features    : TF-IDF feature extraction (dense vectors + feature maps)
- evaluation  : F1 evaluation and summary tables
- pipeline    : High-level binary and multi-class comparisons
"""

from .errors import (ClassifierError, ConfigurationError,
                     NumericalInstabilityError, SerializationError,
                     UnsupportedOperationError)
from .kernels import CustomKernel, LinearKernel, RBFKernel
from .svm import SVM, SVMConfig, SvmClassifier, TrainingStats
from .winnow import Winnow, WinnowConfig
from .multilabel import BinaryRelevance
from .dataset import make_dataset
from .features import FeatureExtractor, VectorizerConfig
from .evaluation import evaluate_classifier, print_summary
from .pipeline import (get_base_classifiers, run_binary_classification,
                       run_multiclass_classification)

__all__ = [
    'ClassifierError',
    'ConfigurationError',
    'NumericalInstabilityError',
    'SerializationError',
    'UnsupportedOperationError',
    'LinearKernel',
    'RBFKernel',
    'CustomKernel',
    'SVM',
    'SVMConfig',
    'SvmClassifier',
    'TrainingStats',
    'Winnow',
    'WinnowConfig',
    'BinaryRelevance',
    'make_dataset',
    'FeatureExtractor',
    'VectorizerConfig',
    'evaluate_classifier',
    'print_summary',
    'get_base_classifiers',
    'run_binary_classification',
    'run_multiclass_classification',
]
