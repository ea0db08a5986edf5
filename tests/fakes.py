"""In-process execution graphs for tests."""

from __future__ import annotations

import json
from typing import Dict, List, Optional, Sequence

from reranking.contracts import TensorType
from schemas.internal.graph import GraphMetadata, InputStyle, TokenCounts


class FakeGraph:
    """Scores documents from a lookup table keyed by document text."""

    def __init__(
        self,
        name: str,
        scores: Dict[str, float] | None = None,
        *,
        metadata: Optional[GraphMetadata] = None,
        prompt_tokens: int = 5,
        completion_tokens: int = 1,
        fail_set_input_at: Optional[int] = None,
        fail_compute_at: Optional[int] = None,
        raw_outputs: Optional[Sequence[bytes]] = None,
    ) -> None:
        self._name = name
        self.scores = dict(scores or {})
        self.metadata = metadata or GraphMetadata(reranking=True)
        self.prompt_tokens = prompt_tokens
        self.completion_tokens = completion_tokens
        self.fail_set_input_at = fail_set_input_at
        self.fail_compute_at = fail_compute_at
        self.raw_outputs = list(raw_outputs) if raw_outputs is not None else None
        self.inputs: List[bytes] = []
        self.compute_calls = 0
        self.metadata_updates = 0
        self._current: Optional[bytes] = None
        self._output = b""

    @property
    def name(self) -> str:
        return self._name

    def set_input(
        self,
        index: int,
        tensor_type: TensorType,
        dimensions: Sequence[int],
        data: bytes,
    ) -> None:
        assert index == 0
        assert tensor_type is TensorType.U8
        assert list(dimensions) == [1]
        if self.fail_set_input_at is not None and len(self.inputs) == self.fail_set_input_at:
            raise RuntimeError("input rejected")
        self.inputs.append(data)
        self._current = data

    def compute(self) -> None:
        call = self.compute_calls
        self.compute_calls += 1
        if self.fail_compute_at is not None and call == self.fail_compute_at:
            raise RuntimeError("backend exploded")
        if self.raw_outputs is not None:
            self._output = self.raw_outputs[call]
            return
        assert self._current is not None
        text = self._current.decode("utf-8")
        if self.metadata.input_style == InputStyle.QUERY_AND_DOCUMENT:
            _, _, text = text.partition(self.metadata.separator)
        self._output = json.dumps({"scores": [self.scores.get(text, 0.0)]}).encode("utf-8")

    def get_output(self, index: int) -> bytes:
        assert index == 0
        return self._output

    def update_metadata(self) -> None:
        self.metadata_updates += 1

    def last_call_token_counts(self) -> TokenCounts:
        return TokenCounts(
            prompt_tokens=self.prompt_tokens,
            completion_tokens=self.completion_tokens,
        )
