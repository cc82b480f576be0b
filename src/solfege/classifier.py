"""
Classifier implementations and selection.

A classifier turns a FeatureSet into a ConfidenceVector. The heuristic
scorer is the default; a trained linear model can be swapped in through the
recognition config.
"""
import logging
from pathlib import Path
from typing import Optional, Protocol, Union

import numpy as np

from .config import RecognitionConfig
from .confidence import GESTURE_CLASSES, ConfidenceVector
from .errors import ConfigError, ModelError
from .features import FeatureSet
from .scorer import HeuristicClassifier, apply_min_separation

logger = logging.getLogger(__name__)


class Classifier(Protocol):
    def classify(self, features: FeatureSet) -> ConfidenceVector:
        ...


class TrainedClassifier:
    """
    Softmax over a linear model of the feature vector.

    The model is a (7, n_features) weight matrix and a bias of 7, rows in
    GestureClass order. How the weights are trained is up to the caller.
    """

    def __init__(self, weights, bias, min_separation: float = 0.15,
                 separation_floor: float = 0.6, separation_penalty: float = 0.8):
        weights = np.asarray(weights, dtype=np.float64)
        bias = np.asarray(bias, dtype=np.float64)
        n_classes = len(GESTURE_CLASSES)
        n_features = len(FeatureSet.names())

        if weights.shape != (n_classes, n_features):
            raise ModelError(
                f"Expected weights of shape {(n_classes, n_features)}, got {weights.shape}"
            )
        if bias.shape != (n_classes,):
            raise ModelError(f"Expected bias of shape {(n_classes,)}, got {bias.shape}")
        if not (np.isfinite(weights).all() and np.isfinite(bias).all()):
            raise ModelError("Model parameters must be finite")

        self._weights = weights
        self._bias = bias
        self._min_separation = min_separation
        self._separation_floor = separation_floor
        self._separation_penalty = separation_penalty

    @classmethod
    def load(cls, path: Union[str, Path], **kwargs) -> "TrainedClassifier":
        """
        Load weights from an .npz archive with 'weights' and 'bias' arrays.

        Raises:
            ModelError: The file is missing, unreadable or mis-shaped.
        """
        path = Path(path)
        if not path.exists():
            raise ModelError(f"Model file not found: {path}")
        try:
            with np.load(path) as data:
                weights = data["weights"]
                bias = data["bias"]
        except (OSError, ValueError, KeyError) as e:
            raise ModelError(f"Could not read model {path}: {e}") from e

        logger.info("Loaded trained classifier from %s", path)
        return cls(weights, bias, **kwargs)

    def classify(self, features: FeatureSet) -> ConfidenceVector:
        if not features.valid:
            return ConfidenceVector.zeros()

        logits = self._weights @ features.as_vector() + self._bias
        logits -= logits.max()
        exp = np.exp(logits)
        probs = exp / exp.sum()
        return apply_min_separation(
            ConfidenceVector.from_array(probs),
            self._min_separation,
            self._separation_floor,
            self._separation_penalty,
        )

    __call__ = classify


def build_classifier(config: Optional[RecognitionConfig] = None) -> Classifier:
    """
    Create the classifier selected by config.classifier.

    Raises:
        ConfigError: Unknown classifier name.
        ModelError: The trained model cannot be loaded.
    """
    config = config or RecognitionConfig()
    separation = dict(
        min_separation=config.min_separation,
        separation_floor=config.separation_floor,
        separation_penalty=config.separation_penalty,
    )

    if config.classifier == "heuristic":
        logger.debug("Using heuristic classifier")
        return HeuristicClassifier(**separation)
    if config.classifier == "trained":
        return TrainedClassifier.load(config.model_path, **separation)
    raise ConfigError(f"Unknown classifier {config.classifier!r}")
