from __future__ import annotations

"""Metric computations for per-session analytics."""

import numpy as np
import pandas as pd
from .config import AnalyticsConfig


def compute_metrics(df: pd.DataFrame, cfg: AnalyticsConfig) -> pd.DataFrame:
    """Compute accuracy, points per answer, pace and a composite mark.

    Returns a copy with added columns:
    - accuracy, points_per_answer, answers_per_min, pace_factor, mark
    """
    out = df.copy()
    # Sessions with no answers count as one to keep ratios finite
    answered = out["answered"].astype("float32").where(out["answered"] > 0, other=1.0)
    out["accuracy"] = (out["correct"].astype("float32") / answered).astype("float32")
    out["points_per_answer"] = (out["score"].astype("float32") / answered).astype("float32")

    minutes = (out["duration_s"].astype("float32") / 60.0).where(out["duration_s"] > 0, other=np.nan)
    out["answers_per_min"] = (out["answered"].astype("float32") / minutes).fillna(0.0).astype("float32")

    # Pace factor: 1 - exp(-alpha * pace/ref), saturating towards 1 for quick sessions
    out["pace_factor"] = (
        1.0 - np.exp(-float(cfg.alpha) * (out["answers_per_min"] / float(cfg.ref_answers_per_min)))
    ).astype("float32")

    out["mark"] = (out["accuracy"] * out["pace_factor"]).clip(0, 1).astype("float32")
    return out
