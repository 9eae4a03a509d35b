from __future__ import annotations

"""Analytics configuration (hyperparameters) using Pydantic."""

from pydantic import BaseModel, Field


class AnalyticsConfig(BaseModel):
    """Hyperparameters for session metrics and smoothing.

    - alpha: pace reward steepness (>0)
    - ref_answers_per_min: answering pace considered "quick" (>0)
    - smoothing_span: EWMA span in sessions (>1)
    """

    alpha: float = Field(1.0, gt=0)
    ref_answers_per_min: float = Field(10.0, gt=0)
    smoothing_span: int = Field(5, gt=1)
