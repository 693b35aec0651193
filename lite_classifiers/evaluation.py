"""
evaluation.py
--------------
Train / validate / test evaluation for toolkit classifiers, reported
with scikit-learn metrics.
"""

import copy

from sklearn.metrics import classification_report, confusion_matrix, f1_score

from .dataset import make_dataset


def predict_binary(classifier, inputs):
    """Discrete 1/0 classification of every input (inputs are copied first)."""
    return [classifier.classify(copy.deepcopy(x)) for x in inputs]


def predict_best_label(classifier, inputs):
    """Highest-scoring label per input, for one-vs-rest classifiers."""
    predictions = []
    for x in inputs:
        scores = classifier.classify(copy.deepcopy(x), continuous_output=True)
        predictions.append(max(scores, key=scores.get))
    return predictions


# ──────────────────────────────────────────────────────────
# Evaluation
# ──────────────────────────────────────────────────────────

def evaluate_classifier(classifier, X_train, y_train, X_val, y_val,
                        X_test, y_test, model_name="",
                        target_names=None, average='macro',
                        predict_fn=predict_binary, verbose=True):
    """Train on (X_train, y_train), evaluate on val and test.

    Parameters
    ----------
    classifier : toolkit classifier (train_batch / classify)
    X_train, y_train : training inputs and labels
    X_val, y_val : validation data
    X_test, y_test : test data
    model_name : str
    target_names : list of str (for classification report)
    average : str (F1 averaging method)
    predict_fn : callable(classifier, inputs) -> list of labels
    verbose : bool

    Returns
    -------
    dict with keys: model_name, engine, stats, f1_val, f1_test, pred_test, model
        `stats` is the SMO TrainingStats for SVM classifiers, else None.
    """
    train_set = make_dataset([copy.deepcopy(x) for x in X_train], list(y_train))
    stats = classifier.train_batch(train_set)

    pred_val = predict_fn(classifier, X_val)
    pred_test = predict_fn(classifier, X_test)

    f1_val = f1_score(y_val, pred_val, average=average, zero_division=0)
    f1_test = f1_score(y_test, pred_test, average=average, zero_division=0)

    if verbose:
        print(f"\n  {model_name}")
        print(f"  {'─' * 55}")
        print(f"  Val  F1-{average}: {f1_val:.4f}")
        print(f"  Test F1-{average}: {f1_test:.4f}")
        print(f"\n  Test Classification Report:")
        print(classification_report(y_test, pred_test, target_names=target_names,
                                    digits=4, zero_division=0))

        cm = confusion_matrix(y_test, pred_test)
        print(f"  Confusion Matrix (test):")
        for row in cm:
            print(f"    {row}")

    return {
        'model_name': model_name,
        'engine': engine_name(classifier),
        'stats': stats,
        'f1_val': f1_val,
        'f1_test': f1_test,
        'pred_test': pred_test,
        'model': classifier
    }


def engine_name(classifier):
    """'SvmClassifier', 'Winnow', or 'OvR/<binary engine>' for one-vs-rest wrappers."""
    inner = getattr(classifier, 'classifiers_by_label', None)
    if inner:
        return f"OvR/{type(next(iter(inner.values()))).__name__}"
    return type(classifier).__name__


def _support_column(stats):
    if stats is None:
        return "-"
    return f"{stats.support_vectors} SV"


def print_summary(results, title=""):
    """Ranked table of engine, F1 scores and retained support vectors."""
    ranked = sorted(results, key=lambda r: r['f1_test'], reverse=True)
    best_f1 = ranked[0]['f1_test']

    print(f"\n  {'─' * 78}")
    print(f"  SUMMARY — {title}")
    print(f"  {'─' * 78}")
    print(f"  {'Model':<34s} {'Engine':<18s} {'Support':>8s} {'Val F1':>8s} {'Test F1':>8s}")
    print(f"  {'─' * 78}")

    for r in ranked:
        marker = " ★" if r['f1_test'] == best_f1 else ""
        print(f"  {r['model_name']:<34s} {r.get('engine', '?'):<18s} "
              f"{_support_column(r.get('stats')):>8s} "
              f"{r['f1_val']:>8.4f} {r['f1_test']:>8.4f}{marker}")
