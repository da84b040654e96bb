from __future__ import annotations

"""Record shapes for cumulative and per-session drill statistics.

Two cumulative shapes exist and a drill commits to one of them:

- "time":    {attempts, firstTry, totalTime, slow}
- "mistake": {attempts, mistakes, times?}

Stored JSON keeps the camelCase field names; the Pydantic models accept
either the alias or the Python name.
"""

from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Literal, Optional, Type

from pydantic import BaseModel, ConfigDict, Field, model_validator

StatsKind = Literal["time", "mistake"]
STATS_KINDS = ("time", "mistake")


class _Record(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    def to_store(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


# --- Cumulative records ---

class TimeTrackedRecord(_Record):
    attempts: int = Field(default=0, ge=0)
    first_try: int = Field(default=0, ge=0, alias="firstTry")
    total_time: float = Field(default=0.0, ge=0, alias="totalTime")
    # older drills never stored slow counts
    slow: Optional[int] = Field(default=None, ge=0)

    @model_validator(mode="after")
    def _counts_le_attempts(self) -> "TimeTrackedRecord":
        if self.first_try > self.attempts:
            raise ValueError("firstTry must be <= attempts")
        if self.slow is not None and self.slow > self.attempts:
            raise ValueError("slow must be <= attempts")
        return self


class MistakeTrackedRecord(_Record):
    attempts: int = Field(default=0, ge=0)
    mistakes: int = Field(default=0, ge=0)
    times: Optional[List[float]] = None

    @model_validator(mode="after")
    def _mistakes_le_attempts(self) -> "MistakeTrackedRecord":
        if self.mistakes > self.attempts:
            raise ValueError("mistakes must be <= attempts")
        return self


# --- Session records (ephemeral, one per item) ---

class TimeSessionRecord(_Record):
    total: int = Field(ge=0)
    first_try: int = Field(ge=0, alias="firstTry")
    times: List[float] = Field(default_factory=list)
    slow: Optional[int] = Field(default=None, ge=0)

    @model_validator(mode="after")
    def _counts_le_total(self) -> "TimeSessionRecord":
        if self.first_try > self.total:
            raise ValueError("firstTry must be <= total")
        if self.slow is not None and self.slow > self.total:
            raise ValueError("slow must be <= total")
        return self


class MistakeSessionRecord(_Record):
    attempts: int = Field(ge=0)
    mistakes: int = Field(ge=0)

    @model_validator(mode="after")
    def _mistakes_le_attempts(self) -> "MistakeSessionRecord":
        if self.mistakes > self.attempts:
            raise ValueError("mistakes must be <= attempts")
        return self


_CUMULATIVE_MODELS: Dict[str, Type[_Record]] = {
    "time": TimeTrackedRecord,
    "mistake": MistakeTrackedRecord,
}
_SESSION_MODELS: Dict[str, Type[_Record]] = {
    "time": TimeSessionRecord,
    "mistake": MistakeSessionRecord,
}


def cumulative_model(kind: str) -> Type[_Record]:
    try:
        return _CUMULATIVE_MODELS[kind]
    except KeyError:
        raise ValueError(f"Unknown stats kind: {kind}") from None


def session_model(kind: str) -> Type[_Record]:
    try:
        return _SESSION_MODELS[kind]
    except KeyError:
        raise ValueError(f"Unknown stats kind: {kind}") from None


def validate_session(kind: str, raw: Dict[str, Any]) -> Dict[str, Dict[str, Any]]:
    """Validate a session mapping and return it in stored (camelCase) form.

    Raises pydantic.ValidationError on the first bad item.
    """
    if not isinstance(raw, dict):
        raise TypeError("session stats must be a mapping of item name -> record")
    model = session_model(kind)
    return {str(name): model.model_validate(rec).to_store() for name, rec in raw.items()}


# --- Derived views (recomputed per query, never stored) ---

@dataclass(frozen=True)
class ProblemArea:
    name: str
    success_rate: float
    slow_rate: float
    avg_time: float
    attempts: int
    first_try: int
    slow: int
    problem_score: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class MistakeArea:
    key: str
    mistake_rate: float
    avg_time: float
    attempts: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
