"""
config.py

Typed configuration loading and validation for Shadow Coach.

Design goals
- Load at most one UTF-8 JSON config file
- Validate with pydantic (defaults included)
- Support environment variable overrides
- No other I/O beyond reading the config file (no directory creation)

Config file location
- If SHADOW_COACH_CONFIG_PATH is set, that file is used.
- Otherwise these paths are searched in order and the first one that exists is used:
  1) ./shadow_coach_config.json (current working directory)
  2) <user config dir>/ShadowCoach/ShadowCoach/shadow_coach_config.json
  3) <user config dir>/ShadowCoach/ShadowCoach/config.json
- If none exists, the built-in defaults apply.

Example config file (shadow_coach_config.json)
{
  "training": {
    "rounds": 3,
    "round_duration_seconds": 180,
    "rest_duration_seconds": 60,
    "difficulty": "intermediate",
    "intensity": "medium"
  },
  "exam": {
    "total_seconds": 60,
    "pass_accuracy": 0.85,
    "pass_min_streak": 8,
    "sub_tick_seconds": 0.1
  },
  "random_seed": null
}
"""

from __future__ import annotations

import json
import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

from platformdirs import user_config_dir
from pydantic import BaseModel, Field, ValidationError, field_validator

from coach_models import Difficulty, Intensity
from exam_session import (
    DEFAULT_SUB_TICK_SECONDS,
    EXAM_TOTAL_SECONDS,
    PASS_ACCURACY,
    PASS_MIN_STREAK,
    ExamSettings,
)
from session_config import SessionConfig


class TrainingConfig(BaseModel):
    rounds: int = Field(default=3, ge=1, description="Rounds per training session.")
    round_duration_seconds: int = Field(default=180, ge=1, description="Round length in seconds.")
    rest_duration_seconds: int = Field(default=60, ge=0, description="Rest between rounds in seconds.")
    difficulty: Difficulty = Field(default=Difficulty.BEGINNER, description="beginner, intermediate, or advanced")
    intensity: Intensity = Field(default=Intensity.MEDIUM, description="low, medium, or high")

    @field_validator("difficulty", "intensity", mode="before")
    @classmethod
    def normalize_enum_text(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    def to_session_config(self, allowed_move_codes: Optional[Sequence[str]] = None) -> SessionConfig:
        return SessionConfig.training(
            rounds=self.rounds,
            round_duration_seconds=self.round_duration_seconds,
            rest_duration_seconds=self.rest_duration_seconds,
            difficulty=self.difficulty,
            intensity=self.intensity,
            allowed_move_codes=allowed_move_codes,
        )


class ExamConfig(BaseModel):
    total_seconds: float = Field(default=EXAM_TOTAL_SECONDS, gt=0, description="Exam-wide countdown in seconds.")
    pass_accuracy: float = Field(default=PASS_ACCURACY, ge=0.0, le=1.0, description="Minimum accuracy to pass.")
    pass_min_streak: int = Field(default=PASS_MIN_STREAK, ge=0, description="Minimum longest streak to pass.")
    sub_tick_seconds: float = Field(default=DEFAULT_SUB_TICK_SECONDS, gt=0, description="Exam timer resolution.")

    def settings_for_level(self, academy_level: int) -> ExamSettings:
        return ExamSettings.for_academy_level(
            academy_level,
            total_seconds=self.total_seconds,
            pass_accuracy=self.pass_accuracy,
            pass_min_streak=self.pass_min_streak,
        )


class AppConfig(BaseModel):
    training: TrainingConfig = Field(default_factory=TrainingConfig)
    exam: ExamConfig = Field(default_factory=ExamConfig)
    random_seed: Optional[int] = Field(default=None, description="Seed for reproducible sessions.")


def _default_config_candidates() -> List[Path]:
    config_directory = Path(user_config_dir("ShadowCoach", "ShadowCoach"))
    return [
        Path.cwd() / "shadow_coach_config.json",
        config_directory / "shadow_coach_config.json",
        config_directory / "config.json",
    ]


def _resolve_config_path() -> Optional[Path]:
    explicit_path_text = os.environ.get("SHADOW_COACH_CONFIG_PATH", "").strip()
    if explicit_path_text:
        return Path(explicit_path_text)

    for candidate_path in _default_config_candidates():
        if candidate_path.exists():
            return candidate_path

    return None


def _read_json_file_utf8(config_path: Path) -> Dict[str, Any]:
    if not config_path.is_file():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    try:
        raw_text = config_path.read_text(encoding="utf-8")
    except OSError as exception:
        raise OSError(f"Failed to read config file: {config_path}. Error: {exception}") from exception

    try:
        parsed = json.loads(raw_text)
    except json.JSONDecodeError as exception:
        raise ValueError(f"Config file is not valid JSON: {config_path}. Error: {exception}") from exception

    if not isinstance(parsed, dict):
        raise ValueError(f"Config file root must be a JSON object: {config_path}")

    return parsed


def _apply_environment_overrides(config_dict: Dict[str, Any]) -> Dict[str, Any]:
    """
    Environment overrides are optional. The config file is the primary source of truth.

    Override variables:
    - SHADOW_COACH_TRAINING_ROUNDS
    - SHADOW_COACH_TRAINING_ROUND_SECONDS
    - SHADOW_COACH_TRAINING_REST_SECONDS
    - SHADOW_COACH_TRAINING_DIFFICULTY
    - SHADOW_COACH_TRAINING_INTENSITY
    - SHADOW_COACH_EXAM_TOTAL_SECONDS
    - SHADOW_COACH_EXAM_PASS_ACCURACY
    - SHADOW_COACH_EXAM_MIN_STREAK
    - SHADOW_COACH_EXAM_SUB_TICK_SECONDS
    - SHADOW_COACH_RANDOM_SEED
    """
    def ensure_nested(config_root: Dict[str, Any], section_name: str) -> Dict[str, Any]:
        section = config_root.get(section_name)
        if isinstance(section, dict):
            section = dict(section)
        else:
            section = {}
        config_root[section_name] = section
        return section

    updated_config = dict(config_dict)

    training_section = ensure_nested(updated_config, "training")
    exam_section = ensure_nested(updated_config, "exam")

    def override_string(env_name: str, target_dict: Dict[str, Any], key_name: str) -> None:
        value_text = os.environ.get(env_name, "")
        if value_text.strip():
            target_dict[key_name] = value_text.strip()

    def override_int(env_name: str, target_dict: Dict[str, Any], key_name: str) -> None:
        value_text = os.environ.get(env_name, "").strip()
        if not value_text:
            return
        try:
            target_dict[key_name] = int(value_text)
        except ValueError:
            return

    def override_float(env_name: str, target_dict: Dict[str, Any], key_name: str) -> None:
        value_text = os.environ.get(env_name, "").strip()
        if not value_text:
            return
        try:
            target_dict[key_name] = float(value_text)
        except ValueError:
            return

    override_int("SHADOW_COACH_TRAINING_ROUNDS", training_section, "rounds")
    override_int("SHADOW_COACH_TRAINING_ROUND_SECONDS", training_section, "round_duration_seconds")
    override_int("SHADOW_COACH_TRAINING_REST_SECONDS", training_section, "rest_duration_seconds")
    override_string("SHADOW_COACH_TRAINING_DIFFICULTY", training_section, "difficulty")
    override_string("SHADOW_COACH_TRAINING_INTENSITY", training_section, "intensity")

    override_float("SHADOW_COACH_EXAM_TOTAL_SECONDS", exam_section, "total_seconds")
    override_float("SHADOW_COACH_EXAM_PASS_ACCURACY", exam_section, "pass_accuracy")
    override_int("SHADOW_COACH_EXAM_MIN_STREAK", exam_section, "pass_min_streak")
    override_float("SHADOW_COACH_EXAM_SUB_TICK_SECONDS", exam_section, "sub_tick_seconds")

    override_int("SHADOW_COACH_RANDOM_SEED", updated_config, "random_seed")

    return updated_config


def load_config(config_path: Optional[Path] = None) -> Tuple[AppConfig, Optional[Path]]:
    resolved_path = config_path if config_path is not None else _resolve_config_path()
    json_dict = _read_json_file_utf8(resolved_path) if resolved_path is not None else {}
    json_dict = _apply_environment_overrides(json_dict)

    source_text = str(resolved_path) if resolved_path is not None else "(defaults)"
    try:
        config = AppConfig.model_validate(json_dict)
    except ValidationError as exception:
        raise ValueError(f"Config validation failed for {source_text}:\n{exception}") from exception

    return config, resolved_path


@lru_cache(maxsize=1)
def get_config() -> Tuple[AppConfig, Optional[Path]]:
    return load_config()


def to_json(config: AppConfig) -> str:
    return json.dumps(config.model_dump(mode="json"), ensure_ascii=False, indent=2)


def main() -> int:
    try:
        config, resolved_path = load_config()
    except (OSError, ValueError) as exception:
        error_payload = {"ok": False, "error": str(exception)}
        print(json.dumps(error_payload, ensure_ascii=False, indent=2))
        return 2

    output_payload = {
        "ok": True,
        "config_path": str(resolved_path) if resolved_path is not None else None,
        "config": json.loads(to_json(config)),
    }
    print(json.dumps(output_payload, ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
