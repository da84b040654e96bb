from __future__ import annotations

"""Matplotlib bar charts of ranked problem areas."""

import os
from typing import Optional

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd


def _barh(labels, values, *, xlabel: str, title: str, xlim: Optional[float], save_path) -> bool:
    if len(values) == 0:
        return False
    y = np.arange(len(values))
    plt.figure(figsize=(6, max(2.0, 0.4 * len(values) + 1)))
    plt.barh(y, values)
    plt.yticks(ticks=y, labels=labels)
    # worst item on top
    plt.gca().invert_yaxis()
    if xlim is not None:
        plt.xlim(0, xlim)
    plt.xlabel(xlabel)
    plt.title(title)
    if save_path:
        plt.savefig(save_path, bbox_inches="tight", dpi=150)
    plt.close()
    return True


def plot_problem_scores(
    df: pd.DataFrame,
    *,
    title: str = "Problem areas",
    save_path: Optional[str | os.PathLike[str]] = None,
) -> bool:
    """Horizontal bars of problem_score (0-200). Returns False when there is nothing to draw."""
    if df.empty or "problem_score" not in df.columns:
        return False
    return _barh(
        df["name"].astype(str).tolist(),
        df["problem_score"].to_numpy(dtype="float64"),
        xlabel="Problem score (100 - success% + slow%)",
        title=title,
        xlim=200,
        save_path=save_path,
    )


def plot_mistake_rates(
    df: pd.DataFrame,
    *,
    title: str = "Mistake areas",
    save_path: Optional[str | os.PathLike[str]] = None,
) -> bool:
    if df.empty or "mistake_rate" not in df.columns:
        return False
    return _barh(
        df["key"].astype(str).tolist(),
        df["mistake_rate"].to_numpy(dtype="float64"),
        xlabel="Mistake rate",
        title=title,
        xlim=1,
        save_path=save_path,
    )
