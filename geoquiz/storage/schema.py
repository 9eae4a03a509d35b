from __future__ import annotations

"""Schema constants and Pydantic models for the Parquet-backed session history."""

from datetime import datetime, timezone
from typing import Literal

import pandas as pd
from pandas.api.types import CategoricalDtype
from pydantic import BaseModel, Field, field_validator, model_validator

# --- Constants ---

DIFFICULTIES = {"easy", "medium", "hard"}


def _cat_dtype(categories: set[str]) -> CategoricalDtype:
    return CategoricalDtype(categories=sorted(categories), ordered=False)


DTYPES = {
    "session_id": "string",
    # timezone-aware UTC timestamps
    "session_start": pd.DatetimeTZDtype(tz="UTC"),
    "difficulty": _cat_dtype(DIFFICULTIES),
    "score": "UInt32",
    "best_streak": "UInt16",
    "answered": "UInt16",
    "correct": "UInt16",
    "duration_s": "UInt16",
}


# --- Pydantic models ---

class SessionRecord(BaseModel):
    session_id: str
    session_start: datetime
    difficulty: Literal["easy", "medium", "hard"]
    score: int = Field(ge=0, le=4294967295)
    best_streak: int = Field(ge=0, le=65535)
    answered: int = Field(ge=0, le=65535)
    correct: int = Field(ge=0, le=65535)
    duration_s: int = Field(default=0, ge=0, le=65535)

    @model_validator(mode="after")
    def _counts_consistent(self) -> "SessionRecord":
        if self.correct > self.answered:
            raise ValueError("correct must be <= answered")
        if self.best_streak > self.correct:
            raise ValueError("best_streak must be <= correct")
        return self

    @field_validator("session_start")
    @classmethod
    def _ensure_utc(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)
