"""
SolfaSign Recognition Module

Classifies hand landmarks into the seven Curwen solfege signs and turns the
per-frame result into stable Enter/Leave gesture events.
"""
from .config import Config, RecognitionConfig, load_config, with_overrides
from .confidence import ConfidenceVector, GestureClass
from .errors import ConfigError, InputError, ModelError, SolfegeError
from .events import EventChannel, EventEmitter, EventKind, GestureEvent
from .features import FeatureSet, extract
from .landmarks import Finger, HandAnnotations, Joint, LandmarkFrame
from .pipeline import GesturePipeline
from .classifier import TrainedClassifier, build_classifier
from .scorer import HeuristicClassifier
from .smoother import LandmarkSmoother, SmoothingState, smooth
from .stability import StabilityGate, StabilityState

__all__ = [
    'Config',
    'RecognitionConfig',
    'load_config',
    'with_overrides',
    'ConfidenceVector',
    'GestureClass',
    'ConfigError',
    'InputError',
    'ModelError',
    'SolfegeError',
    'EventChannel',
    'EventEmitter',
    'EventKind',
    'GestureEvent',
    'FeatureSet',
    'extract',
    'Finger',
    'HandAnnotations',
    'Joint',
    'LandmarkFrame',
    'GesturePipeline',
    'TrainedClassifier',
    'build_classifier',
    'HeuristicClassifier',
    'LandmarkSmoother',
    'SmoothingState',
    'smooth',
    'StabilityGate',
    'StabilityState',
]
