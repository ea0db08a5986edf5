import pytest
from pydantic import ValidationError

from reranking.usage import UsageAccumulator
from schemas.internal.graph import TokenCounts
from schemas.responses import Usage


def test_total_is_recomputed_after_every_update() -> None:
    usage = UsageAccumulator()

    usage.add(5, 1)
    assert usage.total_tokens == 6

    usage.add_counts(TokenCounts(prompt_tokens=7, completion_tokens=0))
    assert (usage.prompt_tokens, usage.completion_tokens, usage.total_tokens) == (12, 1, 13)


def test_snapshot_returns_usage_schema() -> None:
    usage = UsageAccumulator()
    for _ in range(3):
        usage.add(5, 1)

    assert usage.snapshot() == Usage(prompt_tokens=15, completion_tokens=3, total_tokens=18)


def test_negative_counts_are_rejected() -> None:
    usage = UsageAccumulator()

    with pytest.raises(ValueError, match="must be >= 0"):
        usage.add(-1, 0)
    assert usage.total_tokens == 0


def test_usage_schema_enforces_total() -> None:
    with pytest.raises(ValidationError):
        Usage(prompt_tokens=1, completion_tokens=1, total_tokens=3)
