from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Union

if TYPE_CHECKING:
    from .core import GameSession


class Difficulty(Enum):
    EASY = ("easy", 1000, 1)
    MEDIUM = ("medium", 500, 2)
    HARD = ("hard", 200, 3)

    def __init__(self, label: str, interval_ms: int, multiplier: int) -> None:
        self.label = label
        self.interval_ms = interval_ms
        self.multiplier = multiplier

    @classmethod
    def parse(cls, value: Union["Difficulty", str]) -> "Difficulty":
        if isinstance(value, cls):
            return value
        for member in cls:
            if member.label == str(value).strip().lower():
                return member
        raise ValueError(f"unknown difficulty {value!r}")

    def __str__(self) -> str:
        return self.label


@dataclass
class ScoringRules:
    line_clear_scores: tuple[int, int, int, int, int] = (0, 40, 100, 300, 1200)

    def base_points(self, lines: int) -> int:
        if lines < 0:
            raise ValueError(f"negative line count {lines}")
        return self.line_clear_scores[min(lines, len(self.line_clear_scores) - 1)]

    def score_for_lines(self, lines: int, difficulty: Difficulty) -> int:
        return self.base_points(lines) * difficulty.multiplier


def apply_score(session: "GameSession", lines: int) -> int:
    """Add the points for one lock to ``session.score`` and return them."""
    points = session.rules.score_for_lines(lines, session.difficulty)
    session.score += points
    return points
