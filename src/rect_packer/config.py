# src/rect_packer/config.py
from __future__ import annotations

import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

# Iteration budgets for local search. Adjust to taste; "standard" is the default.
ITERATION_PRESETS: dict[str, int] = {
    "quick": 200,
    "standard": 1000,
    "thorough": 5000,
}

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

ENV_VARS: dict[str, str] = {
    "max_iterations": "RECT_PACKER_MAX_ITERATIONS",
    "seed": "RECT_PACKER_SEED",
    "early_stop_fraction": "RECT_PACKER_EARLY_STOP",
    "log_level": "RECT_PACKER_LOG_LEVEL",
}


def get_iteration_budget(preset: str) -> int:
    key = preset.strip().lower()
    if key not in ITERATION_PRESETS:
        raise ValueError(f"Unknown iteration preset '{preset}'. Valid: {sorted(ITERATION_PRESETS.keys())}")
    return ITERATION_PRESETS[key]


class Settings(BaseModel):
    """Solver defaults, overridable through RECT_PACKER_* environment variables."""

    max_iterations: int = Field(default=ITERATION_PRESETS["standard"], gt=0)
    seed: Optional[int] = None
    early_stop_fraction: float = Field(default=0.2, gt=0, le=1)
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def check_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Unknown log level '{value}'. Valid: {list(LOG_LEVELS)}")
        return level

    @classmethod
    def from_env(cls) -> "Settings":
        # Load .env when present (e.g. local dev); does not override existing env
        load_dotenv()

        values: dict[str, str] = {}
        for field_name, env_name in ENV_VARS.items():
            raw = os.getenv(env_name)
            if raw is not None and raw.strip():
                values[field_name] = raw.strip()
        return cls(**values)
