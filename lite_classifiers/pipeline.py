"""
pipeline.py
------------
High-level comparison runs that orchestrate:
  - Part A: Binary classification per target
  - Part B: Multi-class classification (one-vs-rest)
"""

from .evaluation import (evaluate_classifier, predict_best_label,
                         print_summary)
from .multilabel import BinaryRelevance
from .svm import SVMConfig, SvmClassifier
from .winnow import Winnow, WinnowConfig


# ──────────────────────────────────────────────────────────
# Classifier factory
# ──────────────────────────────────────────────────────────

def get_base_classifiers(random_state=0):
    """Return dict of name -> (factory, uses_feature_maps) tuples.

    SVM classifiers read dense vectors; Winnow reads sparse feature maps.
    """
    return {
        'SVM-Linear': (
            lambda: SvmClassifier(SVMConfig(C=1.0, kernel='linear'),
                                  random_state=random_state),
            False
        ),
        'SVM-RBF': (
            lambda: SvmClassifier(SVMConfig(C=1.0, kernel='rbf', rbfsigma=0.5),
                                  random_state=random_state),
            False
        ),
        'Winnow': (
            lambda: Winnow(WinnowConfig(retrain_count=5)),
            True
        ),
        'Winnow-Averaged': (
            lambda: Winnow(WinnowConfig(retrain_count=5, do_averaging=True)),
            True
        ),
    }


def run_binary_classification(target_col, X_dense, X_maps, y_train, y_val,
                              y_test, random_state=0, verbose=True):
    """Run all classifiers for a single binary target.

    Parameters
    ----------
    target_col : str
        Name of the target column (for logging).
    X_dense : dict with keys 'train', 'val', 'test'
        Dense feature vectors.
    X_maps : dict with keys 'train', 'val', 'test'
        Sparse feature maps.
    y_train, y_val, y_test : array-like
        Binary labels (0/1).
    random_state : int
    verbose : bool

    Returns
    -------
    list of result dicts
    """
    if verbose:
        print("=" * 70)
        print(f"BINARY CLASSIFICATION — Target: {target_col}")
        print("=" * 70)

        positives = int(sum(y_train))
        print(f"  Train balance: {positives}/{len(y_train)} "
              f"({positives / len(y_train):.1%} positive)")

    target_names = [f'Non-{target_col}', target_col]
    results = []

    for name, (factory, uses_maps) in get_base_classifiers(random_state).items():
        X = X_maps if uses_maps else X_dense
        res = evaluate_classifier(
            factory(), X['train'], y_train, X['val'], y_val, X['test'], y_test,
            model_name=f"{name} ({target_col})", target_names=target_names,
            verbose=verbose
        )
        results.append(res)

    if verbose:
        print_summary(results, title=f"Binary [{target_col}]")
    return results


def run_multiclass_classification(X_dense, X_maps, y_train, y_val, y_test,
                                  class_names=None, random_state=0,
                                  verbose=True):
    """Run all classifiers for multi-class classification.

    Each binary classifier is wrapped in BinaryRelevance; the predicted
    class is the label with the highest continuous score.

    Parameters
    ----------
    X_dense : dict with keys 'train', 'val', 'test'
    X_maps : dict with keys 'train', 'val', 'test'
    y_train, y_val, y_test : array-like
        Multi-class labels (integers).
    class_names : list of str
        Human-readable class names.
    random_state : int
    verbose : bool

    Returns
    -------
    list of result dicts
    """
    if verbose:
        print("=" * 70)
        print("MULTI-CLASS CLASSIFICATION")
        print("=" * 70)

    results = []
    for name, (factory, uses_maps) in get_base_classifiers(random_state).items():
        X = X_maps if uses_maps else X_dense
        res = evaluate_classifier(
            BinaryRelevance(factory), X['train'], y_train, X['val'], y_val,
            X['test'], y_test, model_name=f"{name} (one-vs-rest)",
            target_names=class_names, predict_fn=predict_best_label,
            verbose=verbose
        )
        results.append(res)

    if verbose:
        print_summary(results, title="Multi-class")
    return results
