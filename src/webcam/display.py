"""
OpenCV drawing helpers for the debug view: hand skeleton, per-sign
confidence bars and the active sign.
"""
from typing import Optional

import cv2
import numpy as np

from solfege.confidence import ConfidenceVector, GestureClass
from solfege.landmarks import HAND_CONNECTIONS, LandmarkFrame

# BGR
SKELETON_COLOR = (0, 255, 0)
BAR_COLOR = (200, 200, 200)
ACTIVE_COLOR = (0, 200, 255)
TEXT_COLOR = (255, 255, 255)

BAR_WIDTH = 150
BAR_HEIGHT = 14
BAR_SPACING = 22


def draw_landmarks(image: np.ndarray, frame: LandmarkFrame) -> np.ndarray:
    """Draw the 21 points and their connections in place."""
    h, w = image.shape[:2]
    pixels = [(int(x * w), int(y * h)) for x, y, _ in frame.points]

    for start_idx, end_idx in HAND_CONNECTIONS:
        cv2.line(image, pixels[start_idx], pixels[end_idx], SKELETON_COLOR, 2)
    for cx, cy in pixels:
        cv2.circle(image, (cx, cy), 5, SKELETON_COLOR, -1)
    return image


def draw_confidences(
    image: np.ndarray,
    confidences: ConfidenceVector,
    active: Optional[GestureClass] = None,
    origin=(10, 60),
) -> np.ndarray:
    """One labelled bar per sign; the active sign is highlighted."""
    x0, y0 = origin
    for i, (gesture, value) in enumerate(confidences.items()):
        y = y0 + i * BAR_SPACING
        color = ACTIVE_COLOR if gesture == active else BAR_COLOR
        cv2.putText(
            image, f"{gesture.value:<3}", (x0, y + BAR_HEIGHT - 2),
            cv2.FONT_HERSHEY_SIMPLEX, 0.5, TEXT_COLOR, 1
        )
        left = x0 + 40
        cv2.rectangle(image, (left, y), (left + BAR_WIDTH, y + BAR_HEIGHT), color, 1)
        fill = int(BAR_WIDTH * value)
        if fill > 0:
            cv2.rectangle(image, (left, y), (left + fill, y + BAR_HEIGHT), color, -1)
        cv2.putText(
            image, f"{value:.2f}", (left + BAR_WIDTH + 8, y + BAR_HEIGHT - 2),
            cv2.FONT_HERSHEY_SIMPLEX, 0.45, TEXT_COLOR, 1
        )
    return image


def draw_overlay(
    image: np.ndarray,
    frame: Optional[LandmarkFrame],
    confidences: ConfidenceVector,
    active: Optional[GestureClass] = None,
) -> np.ndarray:
    """
    Copy of image with the skeleton, confidence bars and active sign drawn.

    Args:
        image: BGR camera image
        frame: Landmarks to draw, or None if no hand is visible
        confidences: Latest confidence vector from the pipeline
        active: Currently active sign, if any
    """
    out = image.copy()
    if frame is not None:
        draw_landmarks(out, frame)

    label = active.value if active is not None else "-"
    cv2.putText(
        out, f"Sign: {label}", (10, 30),
        cv2.FONT_HERSHEY_SIMPLEX, 1, ACTIVE_COLOR if active else TEXT_COLOR, 2
    )
    draw_confidences(out, confidences, active)
    return out
