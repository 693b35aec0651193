"""
features.py
------------
TF-IDF feature extraction that feeds both engines: dense vectors for the
SVM and sparse {term: weight} mappings for Winnow.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from sklearn.feature_extraction.text import TfidfVectorizer
from sklearn.pipeline import FeatureUnion


@dataclass(frozen=True)
class VectorizerConfig:
    max_word_features: int = 2000
    max_char_features: int = 0
    word_ngrams: Tuple[int, int] = (1, 2)
    char_ngrams: Tuple[int, int] = (3, 5)
    min_df: int = 1
    max_df: float = 1.0
    stop_words: Optional[Iterable[str] | str] = None
    sublinear_tf: bool = True


class FeatureExtractor:
    """Word TF-IDF, optionally joined with character n-grams via FeatureUnion.

    Parameters
    ----------
    cfg : VectorizerConfig
        Vectorizer options. `max_char_features=0` disables the char part,
        which keeps the dense vectors small enough for kernel SMO.
    """

    def __init__(self, cfg: VectorizerConfig = VectorizerConfig()):
        self.cfg = cfg
        self.word_tfidf = TfidfVectorizer(
            max_features=cfg.max_word_features,
            ngram_range=cfg.word_ngrams,
            sublinear_tf=cfg.sublinear_tf,
            min_df=cfg.min_df,
            max_df=cfg.max_df,
            stop_words=cfg.stop_words,
            strip_accents='unicode'
        )

        parts = [('word', self.word_tfidf)]
        if cfg.max_char_features > 0:
            self.char_tfidf = TfidfVectorizer(
                max_features=cfg.max_char_features,
                analyzer='char_wb',
                ngram_range=cfg.char_ngrams,
                sublinear_tf=cfg.sublinear_tf,
                min_df=cfg.min_df,
                max_df=cfg.max_df
            )
            parts.append(('char', self.char_tfidf))

        self.feature_union = FeatureUnion(parts)
        self._fitted = False

    def fit_transform(self, texts):
        """Fit on training texts.

        Returns
        -------
        X_dense : np.ndarray
            One row per text (SVM input).
        X_maps : list of dict
            Non-zero {feature name: value} per text (Winnow input).
        """
        X = self.feature_union.fit_transform(_clean(texts))
        self._fitted = True
        print(f"  Features: {X.shape[1]} total")
        return self._both(X)

    def transform(self, texts):
        """Transform new texts with the fitted vectorizers."""
        if not self._fitted:
            raise RuntimeError("Call fit_transform() on training data first.")
        return self._both(self.feature_union.transform(_clean(texts)))

    def get_feature_names(self) -> List[str]:
        return list(self.feature_union.get_feature_names_out())

    def _both(self, X):
        names = self.feature_union.get_feature_names_out()
        X = X.tocsr()
        maps = []
        for row in range(X.shape[0]):
            start, end = X.indptr[row], X.indptr[row + 1]
            maps.append({
                str(names[col]): float(value)
                for col, value in zip(X.indices[start:end], X.data[start:end])
            })
        return X.toarray(), maps


def _clean(texts) -> List[str]:
    """Minimal safe cleaner."""
    return [t.strip() if isinstance(t, str) else "" for t in texts]
