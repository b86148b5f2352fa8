"""
Engine configuration.

The defaults reproduce the difficulty levels of the original games. A TOML file can override them, e.g.

    log_level = "DEBUG"

    [connect_four]
    rows = 6
    cols = 7

    [connect_four.profiles.hard]
    skill = 0.95
    depth = 6
"""

import logging
import tomllib
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from src.core.exceptions import ConfigurationError
from src.core.shared_types import Difficulty


class DifficultyProfile(BaseModel):
    """
    How strong the engine plays.
    ---

    * skill: probability that the optimal search is run for a move (otherwise a random legal move is played)
    * depth: number of plies searched (including the move being chosen)
    * prefer_captures: the random fallback picks among captures when there are any
    """

    model_config = ConfigDict(frozen=True)

    skill: float = Field(default=1.0, ge=0.0, le=1.0)
    depth: int = Field(default=2, ge=1)
    prefer_captures: bool = False


# Chess: easy just grabs material, the other levels search 2 or 3 plies deep.
CHESS_PROFILES: dict[Difficulty, DifficultyProfile] = {
    Difficulty.EASY: DifficultyProfile(skill=0.0, depth=1, prefer_captures=True),
    Difficulty.MEDIUM: DifficultyProfile(skill=1.0, depth=2),
    Difficulty.HARD: DifficultyProfile(skill=1.0, depth=3),
}

# Connect four: the search depth is fixed, the difficulty changes how often the engine plays optimally.
CONNECT_FOUR_PROFILES: dict[Difficulty, DifficultyProfile] = {
    Difficulty.EASY: DifficultyProfile(skill=0.3, depth=5),
    Difficulty.MEDIUM: DifficultyProfile(skill=0.6, depth=5),
    Difficulty.HARD: DifficultyProfile(skill=0.9, depth=5),
}


class ChessConfig(BaseModel):
    profiles: dict[Difficulty, DifficultyProfile] = Field(
        default_factory=lambda: dict(CHESS_PROFILES)
    )


class ConnectFourConfig(BaseModel):
    rows: int = Field(default=6, ge=4)
    cols: int = Field(default=7, ge=4)
    profiles: dict[Difficulty, DifficultyProfile] = Field(
        default_factory=lambda: dict(CONNECT_FOUR_PROFILES)
    )


class EngineConfig(BaseModel):
    chess: ChessConfig = Field(default_factory=ChessConfig)
    connect_four: ConnectFourConfig = Field(default_factory=ConnectFourConfig)
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in logging.getLevelNamesMapping():
            raise ConfigurationError(f"Unknown log level: {value!r}")
        return level

    def chess_profile(self, difficulty: Difficulty) -> DifficultyProfile:
        # a partial table in a config file falls back on the defaults
        return self.chess.profiles.get(difficulty, CHESS_PROFILES[difficulty])

    def connect_four_profile(self, difficulty: Difficulty) -> DifficultyProfile:
        return self.connect_four.profiles.get(
            difficulty, CONNECT_FOUR_PROFILES[difficulty]
        )


def load_config(path: str | Path) -> EngineConfig:
    """Read a TOML file. A missing file means: use the defaults."""
    config_path = Path(path)
    if not config_path.exists():
        return EngineConfig()

    try:
        with config_path.open("rb") as config_file:
            raw = tomllib.load(config_file)
        return EngineConfig.model_validate(raw)
    except (tomllib.TOMLDecodeError, ValidationError) as error:
        raise ConfigurationError(
            f"Could not load engine configuration from {config_path}: {error}"
        ) from error
