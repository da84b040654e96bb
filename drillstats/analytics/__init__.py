from .report import (
    problem_areas_frame,
    mistake_areas_frame,
    areas_frame,
    cumulative_frame,
    export_csv,
    export_ndjson,
    export_parquet,
)
from .plots import plot_problem_scores, plot_mistake_rates

__all__ = [
    "problem_areas_frame",
    "mistake_areas_frame",
    "areas_frame",
    "cumulative_frame",
    "export_csv",
    "export_ndjson",
    "export_parquet",
    "plot_problem_scores",
    "plot_mistake_rates",
]
