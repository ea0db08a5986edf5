"""Cross-encoder execution graph backed by a transformers sequence classifier.

The graph speaks the byte-level contract the engine expects: one UTF-8 input
tensor (``query + separator + document``, or the document alone) and one UTF-8
output tensor holding ``{"scores": [score]}``.

Default model: BAAI/bge-reranker-base
"""

from __future__ import annotations

import json
import logging
import os
from functools import lru_cache
from typing import Optional, Sequence

import torch
from transformers import AutoModelForSequenceClassification, AutoTokenizer

from reranking.contracts import INPUT_TENSOR, OUTPUT_TENSOR, TensorType
from schemas.internal.graph import GraphMetadata, InputStyle, OutputStyle, TokenCounts

logger = logging.getLogger(__name__)

DEFAULT_CROSS_ENCODER_MODEL_ID = "BAAI/bge-reranker-base"


class CrossEncoderGraph:
    """Score one (query, document) pair per compute call."""

    def __init__(
        self,
        *,
        model_id: str = DEFAULT_CROSS_ENCODER_MODEL_ID,
        name: Optional[str] = None,
        metadata: Optional[GraphMetadata] = None,
        device: Optional[str] = None,
        hf_token: Optional[str] = None,
    ) -> None:
        resolved_device = device or _default_device()
        self._device = torch.device(resolved_device)
        token = hf_token or os.environ.get("HF_TOKEN") or os.environ.get(
            "HUGGINGFACE_HUB_TOKEN"
        )
        self._tokenizer = AutoTokenizer.from_pretrained(model_id, token=token)
        self._model = AutoModelForSequenceClassification.from_pretrained(
            model_id, token=token
        )
        self._model.eval()
        self._model.to(self._device)
        self.model_id = model_id
        self.metadata = metadata or GraphMetadata()
        self._name = name or model_id.rsplit("/", 1)[-1]
        self._input: Optional[bytes] = None
        self._output = b""
        self._token_counts = TokenCounts()
        self._separator = self.metadata.separator
        self._input_style = InputStyle(self.metadata.input_style)

    @property
    def name(self) -> str:
        return self._name

    @property
    def device(self) -> str:
        return str(self._device)

    def set_input(
        self,
        index: int,
        tensor_type: TensorType,
        dimensions: Sequence[int],
        data: bytes,
    ) -> None:
        if index != INPUT_TENSOR:
            raise ValueError(f"Unknown input tensor index: {index}")
        if tensor_type is not TensorType.U8:
            raise ValueError(f"Unsupported input tensor type: {tensor_type}")
        if list(dimensions) != [1]:
            raise ValueError(f"Unsupported input tensor shape: {list(dimensions)}")
        self._input = bytes(data)

    def compute(self) -> None:
        if self._input is None:
            raise RuntimeError("No input tensor has been set.")
        text = self._input.decode("utf-8")

        if self._input_style is InputStyle.QUERY_AND_DOCUMENT:
            query, sep, document = text.partition(self._separator)
            if not sep:
                raise ValueError("Input tensor is missing the query/document separator.")
            encoded = self._tokenizer(
                query,
                document,
                truncation=True,
                return_tensors="pt",
                max_length=self.metadata.max_length,
            )
        else:
            encoded = self._tokenizer(
                text,
                truncation=True,
                return_tensors="pt",
                max_length=self.metadata.max_length,
            )

        prompt_tokens = int(encoded["input_ids"].shape[-1])
        encoded = {k: v.to(self._device) for k, v in encoded.items()}

        with torch.inference_mode():
            logits = self._model(**encoded).logits
            scores = _logits_to_relevance_scores(logits)
            scores = scores.to(dtype=torch.float32, device="cpu")

        score = float(scores[0].item())
        self._output = json.dumps({"scores": [score]}).encode("utf-8")
        self._token_counts = TokenCounts(prompt_tokens=prompt_tokens, completion_tokens=0)
        self._input = None

    def get_output(self, index: int) -> bytes:
        if index != OUTPUT_TENSOR:
            raise ValueError(f"Unknown output tensor index: {index}")
        return self._output

    def update_metadata(self) -> None:
        self._separator = self.metadata.separator
        self._input_style = InputStyle(self.metadata.input_style)
        logger.debug("Updated metadata for graph %s", self._name)

    def last_call_token_counts(self) -> TokenCounts:
        return self._token_counts


@lru_cache(maxsize=2)
def load_cross_encoder_graph(
    model_id: str = DEFAULT_CROSS_ENCODER_MODEL_ID,
    name: Optional[str] = None,
    device: Optional[str] = None,
    hf_token: Optional[str] = None,
    separator: Optional[str] = None,
    max_length: int = 512,
    input_style: InputStyle = InputStyle.QUERY_AND_DOCUMENT,
    output_style: OutputStyle = OutputStyle.STRUCTURED_JSON,
) -> CrossEncoderGraph:
    """Return a cached cross-encoder graph instance."""
    metadata = GraphMetadata(
        max_length=max_length, input_style=input_style, output_style=output_style
    )
    if separator is not None:
        metadata.separator = separator
    logger.info("Loading cross-encoder %s", model_id)
    return CrossEncoderGraph(
        model_id=model_id,
        name=name,
        metadata=metadata,
        device=device,
        hf_token=hf_token,
    )


def _logits_to_relevance_scores(logits: torch.Tensor) -> torch.Tensor:
    """Convert model logits to a scalar relevance score in [0, 1]."""
    if logits.ndim == 2 and logits.shape[1] == 1:
        return torch.sigmoid(logits[:, 0])
    if logits.ndim == 2 and logits.shape[1] == 2:
        probs = torch.softmax(logits, dim=1)
        return probs[:, 1]
    flattened = logits.reshape(logits.shape[0], -1)
    if flattened.shape[1] == 0:
        return torch.zeros((logits.shape[0],), device=logits.device)
    return torch.sigmoid(flattened[:, 0])


def _default_device() -> str:
    if torch.cuda.is_available():
        return "cuda"
    if getattr(torch.backends, "mps", None) and torch.backends.mps.is_available():
        return "mps"
    return "cpu"


__all__ = [
    "DEFAULT_CROSS_ENCODER_MODEL_ID",
    "CrossEncoderGraph",
    "load_cross_encoder_graph",
]
