from .beatmap import (
    Beatmap,
    Circle,
    HitObject,
    HoldNote,
    Slider,
    Spinner,
    TimingPoint,
)
from .client import download_beatmap
from .curve import Curve
from .game_mode import GameMode
from .mod import Mod
from .position import Position
from .rules import LATEST, RuleVersion, UnknownRuleVersion, get_rule_version
from .stars import DifficultyAttributes, stars

__version__ = "0.1.0"


__all__ = [
    "Beatmap",
    "Circle",
    "Curve",
    "DifficultyAttributes",
    "GameMode",
    "HitObject",
    "HoldNote",
    "LATEST",
    "Mod",
    "Position",
    "RuleVersion",
    "Slider",
    "Spinner",
    "TimingPoint",
    "UnknownRuleVersion",
    "download_beatmap",
    "get_rule_version",
    "stars",
]
