from __future__ import annotations

"""Matplotlib plots for score trends and per-difficulty comparison."""

import os
from typing import Optional

import numpy as np
import pandas as pd
import matplotlib.pyplot as plt


def plot_trend(
    df: pd.DataFrame,
    *,
    difficulty: Optional[str] = None,
    value_col: str = "score",
    save_path: Optional[str | os.PathLike[str]] = None,
) -> bool:
    """Plot `value_col` per session, with its EWMA if present. False if no data."""
    g = df.copy()
    if difficulty is not None:
        g = g[g["difficulty"].astype("string") == difficulty]
    if g.empty:
        return False
    g = g.sort_values("session_idx")
    plt.figure()
    plt.plot(g["session_idx"], g[value_col].astype("float64"), marker="o", linestyle="", label=value_col)
    smooth_col = f"{value_col}_smooth"
    if smooth_col in g.columns:
        plt.plot(g["session_idx"], g[smooth_col].astype("float64"), linewidth=2, label=f"{value_col} (EWMA)")
    plt.xlabel("Session")
    plt.ylabel(value_col)
    plt.title(f"Trend: {difficulty}" if difficulty else "Trend")
    plt.legend()
    if save_path:
        plt.savefig(save_path, bbox_inches="tight", dpi=150)
    plt.close()
    return True


def plot_difficulty_bars(
    df: pd.DataFrame,
    *,
    value_col: str = "accuracy",
    save_path: Optional[str | os.PathLike[str]] = None,
) -> bool:
    """Mean `value_col` per difficulty as a bar chart. False if no data."""
    if df.empty:
        return False
    means = df[value_col].astype("float64").groupby(df["difficulty"], observed=True).mean()
    if means.empty:
        return False
    plt.figure()
    x = np.arange(len(means))
    plt.bar(x, means.to_numpy())
    plt.xticks(ticks=x, labels=means.index.astype(str))
    plt.xlabel("Difficulty")
    plt.ylabel(value_col)
    plt.title(f"Mean {value_col} by difficulty")
    if save_path:
        plt.savefig(save_path, bbox_inches="tight", dpi=150)
    plt.close()
    return True
