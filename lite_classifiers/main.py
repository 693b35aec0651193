#!/usr/bin/env python3
"""
main.py
--------
Example usage of the lite_classifiers package.

Adapt the DATA LOADING and LABEL CREATION sections to your own dataset.
The rest of the pipeline works independently of the data source.

Usage:
    python -m lite_classifiers.main --train train.csv --val val.csv --test test.csv
"""

import argparse
import json
import sys
from pathlib import Path

import pandas as pd

from lite_classifiers import (
    ClassifierError,
    FeatureExtractor,
    VectorizerConfig,
    run_binary_classification,
    run_multiclass_classification,
)


# ══════════════════════════════════════════════════════════
# CONFIGURATION — adapt these to your dataset
# ══════════════════════════════════════════════════════════

# Column containing the raw text
TEXT_COLUMN = 'text'

# Binary target columns (each must be 0/1)
BINARY_TARGETS = ['label']

# Column holding an integer class id for the multi-class run (optional)
MULTICLASS_COLUMN = 'category'


def load_split(path):
    df = pd.read_csv(path)
    if "Unnamed: 0" in df.columns:
        del df["Unnamed: 0"]
    return df


def save_models(results, save_dir):
    """Write the best model of every binary target as a JSON snapshot."""
    save_dir = Path(save_dir)
    save_dir.mkdir(parents=True, exist_ok=True)

    for target_col, target_results in results.items():
        best = max(target_results, key=lambda x: x['f1_test'])
        out_path = save_dir / f"{target_col}.json"
        with open(out_path, 'w') as f:
            json.dump({'model_name': best['model_name'],
                       'snapshot': best['model'].to_json()}, f)
        print(f"  Saved {best['model_name']} → {out_path}")


# ══════════════════════════════════════════════════════════
# MAIN PIPELINE
# ══════════════════════════════════════════════════════════

def main(train_path, val_path, test_path, save_dir=None, random_state=0):

    # ── 1. Data Loading ──────────────────────────────────
    print("=" * 70)
    print("1. DATA LOADING")
    print("=" * 70)

    train = load_split(train_path)
    val = load_split(val_path)
    test = load_split(test_path)

    print(f"  Train: {len(train)} samples")
    print(f"  Val:   {len(val)} samples")
    print(f"  Test:  {len(test)} samples")

    # ── 2. Feature Extraction ────────────────────────────
    print("\n" + "=" * 70)
    print("2. FEATURE EXTRACTION")
    print("=" * 70)

    extractor = FeatureExtractor(VectorizerConfig(max_word_features=2000))

    X_train_dense, X_train_maps = extractor.fit_transform(train[TEXT_COLUMN])
    X_val_dense, X_val_maps = extractor.transform(val[TEXT_COLUMN])
    X_test_dense, X_test_maps = extractor.transform(test[TEXT_COLUMN])

    X_dense = {'train': X_train_dense, 'val': X_val_dense, 'test': X_test_dense}
    X_maps = {'train': X_train_maps, 'val': X_val_maps, 'test': X_test_maps}

    # ── 3. Part A: Binary Classification ─────────────────
    print("\n" + "=" * 70)
    print("3. PART A — BINARY CLASSIFICATION")
    print("=" * 70)

    all_binary_results = {}
    for target_col in BINARY_TARGETS:
        all_binary_results[target_col] = run_binary_classification(
            target_col=target_col,
            X_dense=X_dense, X_maps=X_maps,
            y_train=train[target_col].to_numpy(),
            y_val=val[target_col].to_numpy(),
            y_test=test[target_col].to_numpy(),
            random_state=random_state
        )

    # ── 4. Part B: Multi-class Classification ────────────
    mc_results = None
    if MULTICLASS_COLUMN in train.columns:
        print("\n" + "=" * 70)
        print("4. PART B — MULTI-CLASS CLASSIFICATION")
        print("=" * 70)

        mc_results = run_multiclass_classification(
            X_dense=X_dense, X_maps=X_maps,
            y_train=train[MULTICLASS_COLUMN].to_numpy(),
            y_val=val[MULTICLASS_COLUMN].to_numpy(),
            y_test=test[MULTICLASS_COLUMN].to_numpy(),
            random_state=random_state
        )

    # ── 5. Summary ───────────────────────────────────────
    print("\n" + "=" * 70)
    print("BEST MODELS")
    print("=" * 70)

    for target_col, results in all_binary_results.items():
        best = max(results, key=lambda x: x['f1_test'])
        print(f"    {target_col:12s} → {best['model_name']:<40s} "
              f"Test F1: {best['f1_test']:.4f}")

    if mc_results:
        best_mc = max(mc_results, key=lambda x: x['f1_test'])
        print(f"    multi-class  → {best_mc['model_name']:<40s} "
              f"Test F1: {best_mc['f1_test']:.4f}")

    if save_dir:
        save_models(all_binary_results, save_dir)

    return all_binary_results, mc_results


if __name__ == "__main__":
    parser = argparse.ArgumentParser(
        description="Compare SMO-SVM and Winnow classifiers on a text dataset"
    )
    parser.add_argument('--train', required=True, help='Path to train CSV')
    parser.add_argument('--val', required=True, help='Path to validation CSV')
    parser.add_argument('--test', required=True, help='Path to test CSV')
    parser.add_argument('--save-dir', default=None,
                        help='Directory for JSON snapshots of the best models')
    parser.add_argument('--seed', type=int, default=0,
                        help='Seed for SMO pair selection')

    args = parser.parse_args()
    try:
        main(args.train, args.val, args.test, args.save_dir, args.seed)
    except ClassifierError as exc:
        print(f"error: {exc}", file=sys.stderr)
        sys.exit(1)
