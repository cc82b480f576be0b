"""
SolfaSign Webcam Module

Hand tracking using MediaPipe, the OpenCV overlay and the Qt worker.
"""
from .hand_tracker import HandTracker
from .display import draw_overlay
from .worker import RecognitionWorker

__all__ = [
    'HandTracker',
    'draw_overlay',
    'RecognitionWorker',
]
