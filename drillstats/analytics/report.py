from __future__ import annotations

"""Tabular views of cumulative stats and problem areas (pandas)."""

from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

import numpy as np
import pandas as pd

from ..stats.schema import MistakeArea, ProblemArea

PROBLEM_COLUMNS = ["name", "success_rate", "slow_rate", "avg_time", "attempts", "first_try", "slow", "problem_score"]
MISTAKE_COLUMNS = ["key", "mistake_rate", "avg_time", "attempts"]


def problem_areas_frame(areas: Sequence[ProblemArea]) -> pd.DataFrame:
    """One row per ranked item, rank order preserved."""
    if not areas:
        return pd.DataFrame({c: pd.Series(dtype="float64") for c in PROBLEM_COLUMNS}).astype({"name": "string"})
    df = pd.DataFrame([asdict(a) for a in areas], columns=PROBLEM_COLUMNS)
    return df.astype({"name": "string", "attempts": "int64", "first_try": "int64", "slow": "int64"})


def mistake_areas_frame(areas: Sequence[MistakeArea]) -> pd.DataFrame:
    if not areas:
        return pd.DataFrame({c: pd.Series(dtype="float64") for c in MISTAKE_COLUMNS}).astype({"key": "string"})
    df = pd.DataFrame([asdict(a) for a in areas], columns=MISTAKE_COLUMNS)
    return df.astype({"key": "string"})


def areas_frame(areas: Sequence[Any]) -> pd.DataFrame:
    if areas and isinstance(areas[0], MistakeArea):
        return mistake_areas_frame(areas)
    return problem_areas_frame(areas)


def cumulative_frame(cumulative_stats: Optional[Mapping[str, Mapping[str, Any]]], kind: str) -> pd.DataFrame:
    """Every stored item (no threshold) with convenience rate columns.

    Adds for kind "time": success_rate, slow_rate, avg_time (percent / seconds)
    and for kind "mistake": mistake_rate. Rates are NaN where attempts == 0.
    """
    rows: List[Dict[str, Any]] = []
    for name, rec in (cumulative_stats or {}).items():
        row = {"item": name}
        row.update({k: v for k, v in rec.items() if k != "times"})
        if kind == "mistake":
            row["n_times"] = len(rec.get("times") or [])
        rows.append(row)
    df = pd.DataFrame(rows)
    if df.empty:
        return df
    attempts = df["attempts"].astype("float64").to_numpy()
    with np.errstate(divide="ignore", invalid="ignore"):
        safe = np.where(attempts > 0, attempts, np.nan)
        if kind == "time":
            slow = pd.to_numeric(df["slow"]).fillna(0) if "slow" in df.columns else pd.Series(0, index=df.index)
            df["slow"] = slow.astype("int64")
            df["success_rate"] = df["firstTry"].astype("float64").to_numpy() / safe * 100
            df["slow_rate"] = df["slow"].astype("float64").to_numpy() / safe * 100
            df["avg_time"] = df["totalTime"].astype("float64").to_numpy() / safe
        elif kind == "mistake":
            df["mistake_rate"] = df["mistakes"].astype("float64").to_numpy() / safe
    return df.sort_values("item", kind="stable").reset_index(drop=True)


def export_csv(df: pd.DataFrame, out_path: Path) -> Path:
    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(out_path, index=False)
    return out_path


def export_ndjson(df: pd.DataFrame, out_path: Path) -> Path:
    """Line-delimited JSON for quick inspection."""
    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    df.to_json(out_path, orient="records", lines=True)
    return out_path


def export_parquet(df: pd.DataFrame, out_path: Path) -> Path:
    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    df.to_parquet(out_path, engine="pyarrow", compression="zstd", index=False)
    return out_path
