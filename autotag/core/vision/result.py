# autotag/core/vision/result.py
"""
Explicit step outcome for the vision pipeline.

Each step (encode, render, call, extract, parse) returns a `StepResult` instead
of raising, so the orchestrator can compose them and decide what gets cached.

    ok        -> value is set
    no_result -> nothing to do (e.g. missing hash); not an error
    error     -> the step failed; `reason` says why
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, Literal, TypeVar

T = TypeVar("T")
U = TypeVar("U")

Status = Literal["ok", "no_result", "error"]


@dataclass(frozen=True)
class StepResult(Generic[T]):
    status: Status
    value: T | None = None
    reason: str = ""

    @classmethod
    def success(cls, value: T) -> StepResult[T]:
        return cls("ok", value)

    @classmethod
    def nothing(cls, reason: str = "") -> StepResult[T]:
        return cls("no_result", None, reason)

    @classmethod
    def failure(cls, reason: str) -> StepResult[T]:
        return cls("error", None, reason)

    @property
    def ok(self) -> bool:
        return self.status == "ok" and self.value is not None

    def then(self, fn: Callable[[T], StepResult[U]]) -> StepResult[U]:
        """Chain the next step; non-ok results pass through unchanged."""
        if not self.ok:
            return StepResult(self.status, None, self.reason)
        return fn(self.value)  # type: ignore[arg-type]
