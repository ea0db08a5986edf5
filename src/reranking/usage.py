"""Token usage accounting across repeated graph invocations."""

from __future__ import annotations

from schemas.internal.graph import TokenCounts
from schemas.responses import Usage


class UsageAccumulator:
    """Running token totals; `total_tokens` is recomputed on every update."""

    def __init__(self) -> None:
        self.prompt_tokens = 0
        self.completion_tokens = 0
        self.total_tokens = 0

    def add(self, prompt_tokens: int, completion_tokens: int) -> None:
        if prompt_tokens < 0 or completion_tokens < 0:
            raise ValueError("Token counts must be >= 0.")
        self.prompt_tokens += prompt_tokens
        self.completion_tokens += completion_tokens
        self.total_tokens = self.prompt_tokens + self.completion_tokens

    def add_counts(self, counts: TokenCounts) -> None:
        self.add(counts.prompt_tokens, counts.completion_tokens)

    def snapshot(self) -> Usage:
        return Usage(
            prompt_tokens=self.prompt_tokens,
            completion_tokens=self.completion_tokens,
            total_tokens=self.total_tokens,
        )


__all__ = ["UsageAccumulator"]
