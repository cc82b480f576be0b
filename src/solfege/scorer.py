"""
Heuristic confidence scoring of the seven solfege hand signs.

Each sign gets a weighted sum over the FeatureSet. Commonly confused pairs
are then disambiguated by a secondary feature, and a global separation rule
pushes the runner-up down when the two best signs are nearly tied.
"""
from typing import Callable, Dict, List, Tuple

from .confidence import ConfidenceVector, GestureClass
from .features import FeatureSet
from .geometry import map_range

# Both scores of a pair must exceed this before the pair is disambiguated
AMBIGUITY_LEVEL = 0.5

DO_LA_PENALTY = 0.6
RE_TI_PENALTY = 0.5
MI_SOL_PENALTY = 0.7


def _flag(value: bool) -> float:
    return 1.0 if value else 0.0


def score_do(f: FeatureSet) -> float:
    # Closed fist, thumb out, pinky side towards the camera
    return (0.40 * f.mean_curl
            + 0.35 * f.fist_thumb_out
            + 0.25 * _flag(f.pinky_side_facing_camera))


def score_re(f: FeatureSet) -> float:
    return (0.35 * f.index_extension
            + 0.25 * _flag(f.index_pointing_up)
            + 0.40 * f.others_curl)


def score_mi(f: FeatureSet) -> float:
    return (0.40 * f.flat_horizontal
            + 0.30 * _flag(f.palm_facing_down)
            + 0.30 * f.fingers_together)


def score_fa(f: FeatureSet) -> float:
    return (0.35 * _flag(f.palm_facing_camera)
            + 0.35 * _flag(f.hand_pointing_down)
            + 0.30 * _flag(f.thumb_pointing_down))


def score_sol(f: FeatureSet) -> float:
    return (0.30 * f.mean_extension
            + 0.20 * _flag(f.palm_facing_down)
            + 0.25 * _flag(f.back_of_hand_visible)
            + 0.25 * _flag(f.hand_pointing_forward))


def score_la(f: FeatureSet) -> float:
    return (0.50 * f.cup_shape
            + 0.25 * _flag(f.palm_facing_down)
            + 0.25 * f.fingers_together)


def score_ti(f: FeatureSet) -> float:
    return 0.60 * f.index_angle + 0.40 * _flag(f.index_pointing_up)


SCORERS: Dict[GestureClass, Callable[[FeatureSet], float]] = {
    GestureClass.DO: score_do,
    GestureClass.RE: score_re,
    GestureClass.MI: score_mi,
    GestureClass.FA: score_fa,
    GestureClass.SOL: score_sol,
    GestureClass.LA: score_la,
    GestureClass.TI: score_ti,
}


def base_scores(features: FeatureSet) -> Dict[GestureClass, float]:
    """Raw weighted-sum score of every class; all zero for an invalid FeatureSet."""
    if not features.valid:
        return {gesture: 0.0 for gesture in SCORERS}
    return {gesture: scorer(features) for gesture, scorer in SCORERS.items()}


def _resolve(scores: Dict[GestureClass, float], first: GestureClass, second: GestureClass,
             first_evidence: float, second_evidence: float, penalty: float) -> None:
    """Penalize whichever of an ambiguous pair has the weaker evidence."""
    if scores[first] <= AMBIGUITY_LEVEL or scores[second] <= AMBIGUITY_LEVEL:
        return
    if first_evidence > second_evidence:
        scores[second] *= penalty
    else:
        scores[first] *= penalty


def disambiguate(scores: Dict[GestureClass, float], f: FeatureSet) -> Dict[GestureClass, float]:
    """
    Apply the pairwise tie-break rules, in order: Do/La, Re/Ti, Mi/Sol.

    Returns a new dict; the input is not modified.
    """
    scores = dict(scores)

    # Do vs La: cupped, palm-down hand against a tight fist
    la_evidence = f.cup_shape + 0.25 * _flag(f.palm_facing_down)
    do_evidence = map_range(f.mean_curl, 0.6, 1.0)
    _resolve(scores, GestureClass.LA, GestureClass.DO, la_evidence, do_evidence, DO_LA_PENALTY)

    # Re vs Ti: thumb out with an angled index against a straight-up index
    ti_evidence = (f.thumb_extension + f.index_angle) / 2
    re_evidence = map_range(f.index_dot_up, 0.7, 1.0)
    _resolve(scores, GestureClass.TI, GestureClass.RE, ti_evidence, re_evidence, RE_TI_PENALTY)

    # Mi vs Sol: horizontal palm-down hand against a forward-pointing back-of-hand
    mi_evidence = f.hand_horizontal and f.palm_facing_down
    sol_evidence = f.hand_pointing_forward and f.back_of_hand_visible
    if mi_evidence != sol_evidence:
        _resolve(scores, GestureClass.MI, GestureClass.SOL,
                 _flag(mi_evidence), _flag(sol_evidence), MI_SOL_PENALTY)
    else:
        _resolve(scores, GestureClass.MI, GestureClass.SOL,
                 scores[GestureClass.MI], scores[GestureClass.SOL], MI_SOL_PENALTY)

    return scores


def apply_min_separation(
    confidences: ConfidenceVector,
    min_separation: float = 0.15,
    floor: float = 0.6,
    penalty: float = 0.8,
) -> ConfidenceVector:
    """
    Push the runner-up down when the two best classes are nearly tied.

    If the best confidence exceeds floor and the second best is within
    min_separation of it, the second best is multiplied by penalty.
    """
    ranked: List[Tuple[GestureClass, float]] = confidences.ranked()
    (_, best), (runner_up, second) = ranked[0], ranked[1]
    if best > floor and best - second < min_separation:
        values = dict(confidences.items())
        values[runner_up] = second * penalty
        return ConfidenceVector(values)
    return confidences


class HeuristicClassifier:
    """
    Rule-based Classifier: weighted scores, pairwise disambiguation, then
    the global separation rule. Output is always clamped to [0, 1].
    """

    def __init__(self, min_separation: float = 0.15, separation_floor: float = 0.6,
                 separation_penalty: float = 0.8):
        self._min_separation = min_separation
        self._separation_floor = separation_floor
        self._separation_penalty = separation_penalty

    def classify(self, features: FeatureSet) -> ConfidenceVector:
        scores = disambiguate(base_scores(features), features)
        return apply_min_separation(
            ConfidenceVector(scores),
            self._min_separation,
            self._separation_floor,
            self._separation_penalty,
        )

    __call__ = classify
