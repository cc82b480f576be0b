"""
Config loader for SolfaSign.
Loads YAML configuration with dataclass validation.
"""
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Optional
import yaml

from .errors import ConfigError

CLASSIFIERS = ("heuristic", "trained")


def _check_unit(name: str, value: float) -> None:
    if not 0.0 <= value <= 1.0:
        raise ConfigError(f"{name} must be in [0, 1], got {value}")


@dataclass
class CameraConfig:
    device_id: int = 0
    width: int = 1280
    height: int = 720
    fps: int = 30
    mirror: bool = True  # Selfie view; feature axes assume a mirrored image


@dataclass
class MediaPipeConfig:
    model_path: Optional[str] = None
    max_num_hands: int = 1
    min_detection_confidence: float = 0.5
    min_presence_confidence: float = 0.5
    min_tracking_confidence: float = 0.5


@dataclass
class RecognitionConfig:
    smoothing_factor: float = 0.7     # EMA weight of the previous frame (1 = frozen)
    detection_threshold: float = 0.7  # Confidence a sign must exceed to count
    hold_delay_ms: float = 200.0      # Sustain time before a candidate becomes active
    min_separation: float = 0.15      # Required gap between the two best signs...
    separation_floor: float = 0.6     # ...once the best one is above this
    separation_penalty: float = 0.8   # Factor applied to the runner-up on a near tie
    classifier: str = "heuristic"     # "heuristic" or "trained"
    model_path: Optional[str] = None  # .npz weights for the trained classifier

    def __post_init__(self):
        for name in ("smoothing_factor", "detection_threshold", "min_separation",
                     "separation_floor", "separation_penalty"):
            _check_unit(name, getattr(self, name))
        if self.hold_delay_ms < 0:
            raise ConfigError(f"hold_delay_ms must be >= 0, got {self.hold_delay_ms}")
        if self.classifier not in CLASSIFIERS:
            raise ConfigError(
                f"classifier must be one of {', '.join(CLASSIFIERS)}, got {self.classifier!r}"
            )
        if self.classifier == "trained" and not self.model_path:
            raise ConfigError("The trained classifier needs a model_path")


@dataclass
class AudioConfig:
    enabled: bool = True
    synth: str = "console"


@dataclass
class UIConfig:
    show_preview: bool = True
    debug_overlay: bool = False


@dataclass
class Config:
    camera: CameraConfig = field(default_factory=CameraConfig)
    mediapipe: MediaPipeConfig = field(default_factory=MediaPipeConfig)
    recognition: RecognitionConfig = field(default_factory=RecognitionConfig)
    audio: AudioConfig = field(default_factory=AudioConfig)
    ui: UIConfig = field(default_factory=UIConfig)


def _dict_to_dataclass(cls, data: dict):
    """Convert a dict to a dataclass, ignoring unknown keys."""
    if data is None:
        return cls()
    if not isinstance(data, dict):
        raise ConfigError(f"Section for {cls.__name__} must be a mapping")
    field_names = {f.name for f in cls.__dataclass_fields__.values()}
    filtered = {k: v for k, v in data.items() if k in field_names}
    try:
        return cls(**filtered)
    except TypeError as e:
        raise ConfigError(f"Invalid {cls.__name__}: {e}") from e


def load_config(config_path: Optional[Path] = None) -> Config:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to config file. If None, uses default config.yaml
                    in project root.

    Returns:
        Config dataclass with all settings.

    Raises:
        ConfigError: A value is out of range or the file is not valid YAML.
    """
    if config_path is None:
        # Default to config.yaml in project root
        config_path = Path(__file__).parent.parent.parent / "config.yaml"

    config_path = Path(config_path)

    if not config_path.exists():
        # Return defaults if no config file
        return Config()

    with open(config_path, 'r') as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Could not parse {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"{config_path} must contain a mapping of sections")

    return Config(
        camera=_dict_to_dataclass(CameraConfig, data.get('camera')),
        mediapipe=_dict_to_dataclass(MediaPipeConfig, data.get('mediapipe')),
        recognition=_dict_to_dataclass(RecognitionConfig, data.get('recognition')),
        audio=_dict_to_dataclass(AudioConfig, data.get('audio')),
        ui=_dict_to_dataclass(UIConfig, data.get('ui')),
    )


def with_overrides(
    config: RecognitionConfig,
    classifier: Optional[str] = None,
    model_path: Optional[str] = None,
    hold_delay_ms: Optional[float] = None,
) -> RecognitionConfig:
    """
    Copy of a RecognitionConfig with command line overrides applied.

    A model_path without an explicit classifier selects the trained one.
    The copy is validated like a freshly loaded config.

    Raises:
        ConfigError: An overridden value is out of range.
    """
    changes = {}
    if model_path:
        changes["model_path"] = str(model_path)
        changes["classifier"] = classifier or "trained"
    elif classifier:
        changes["classifier"] = classifier
    if hold_delay_ms is not None:
        changes["hold_delay_ms"] = hold_delay_ms
    return replace(config, **changes)
