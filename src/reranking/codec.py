"""Tensor codec between rerank inputs and the graph's byte-level I/O.

Input styles:
- ``query_and_document``: ``query + separator + document`` as UTF-8 (default).
- ``document_only``: the document alone. Scores are not conditioned on the
  query; kept for models loaded that way, never the default.

Output styles:
- ``structured_json``: UTF-8 JSON object with a non-empty ``scores`` list; the
  first entry is the relevance score (default).
- ``placeholder``: the output carries no usable score and every document gets
  ``PLACEHOLDER_SCORE``. The resulting order is all ties, i.e. the input order.
"""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, NoReturn, Optional

from core.errors import InvalidOutputEncodingError, MalformedScorePayloadError
from schemas.internal.graph import DEFAULT_SEPARATOR, GraphMetadata, InputStyle, OutputStyle

logger = logging.getLogger(__name__)

PLACEHOLDER_SCORE = 1.0


@dataclass(frozen=True)
class TensorCodec:
    input_style: InputStyle = InputStyle.QUERY_AND_DOCUMENT
    output_style: OutputStyle = OutputStyle.STRUCTURED_JSON
    separator: str = DEFAULT_SEPARATOR

    def __post_init__(self) -> None:
        if self.input_style is InputStyle.DOCUMENT_ONLY:
            logger.warning(
                "Reranker input style is document_only: the query is not sent to the model."
            )
        if self.output_style is OutputStyle.PLACEHOLDER:
            logger.warning(
                "Reranker output style is placeholder: every document scores %s, "
                "ranking keeps the input order.",
                PLACEHOLDER_SCORE,
            )

    @classmethod
    def for_metadata(cls, metadata: GraphMetadata) -> "TensorCodec":
        return cls(
            input_style=InputStyle(metadata.input_style),
            output_style=OutputStyle(metadata.output_style),
            separator=metadata.separator,
        )

    def encode(self, query: str, document: str) -> bytes:
        if self.input_style is InputStyle.DOCUMENT_ONLY:
            return document.encode("utf-8")
        # the graph splits on the first separator, so the query must not contain it
        if self.separator and self.separator in query:
            raise ValueError(f"Query must not contain the separator {self.separator!r}.")
        return f"{query}{self.separator}{document}".encode("utf-8")

    def decode(self, buffer: bytes, *, index: Optional[int] = None) -> float:
        """Turn one output buffer into a relevance score."""
        text = _decode_utf8(buffer, index)
        if self.output_style is OutputStyle.PLACEHOLDER:
            logger.debug("Placeholder output for document %s: %s", index, text)
            return PLACEHOLDER_SCORE
        return _score_from_payload(text, index)


def _decode_utf8(buffer: bytes, index: Optional[int]) -> str:
    try:
        return bytes(buffer).decode("utf-8")
    except UnicodeDecodeError as exc:
        message = (
            "Failed to decode the buffer of the inference result to a utf-8 string. "
            f"Reason: {exc}"
        )
        logger.error("%s (document %s)", message, index)
        raise InvalidOutputEncodingError(message, context={"index": index}) from exc


def _score_from_payload(text: str, index: Optional[int]) -> float:
    payload = _load_json_object(text)
    if payload is None:
        _malformed(f"Score payload is not a JSON object: {text!r}", index)

    scores = payload.get("scores")
    if not isinstance(scores, list) or not scores:
        _malformed(f"Score payload has no scores: {text!r}", index)

    first = scores[0]
    if isinstance(first, bool) or not isinstance(first, (int, float)):
        _malformed(f"First score is not a number: {first!r}", index)

    score = float(first)
    if not math.isfinite(score):
        _malformed(f"First score is not finite: {first!r}", index)
    return score


def _load_json_object(text: str) -> Optional[Dict[str, Any]]:
    stripped = text.strip()
    try:
        parsed = json.loads(stripped)
    except json.JSONDecodeError:
        parsed = _first_embedded_object(stripped)
    return parsed if isinstance(parsed, dict) else None


def _first_embedded_object(text: str) -> Optional[Dict[str, Any]]:
    # Models sometimes wrap the payload in prose or a ```json fence.
    decoder = json.JSONDecoder()
    start = text.find("{")
    while start != -1:
        try:
            parsed, _ = decoder.raw_decode(text, start)
        except json.JSONDecodeError:
            parsed = None
        if isinstance(parsed, dict):
            return parsed
        start = text.find("{", start + 1)
    return None


def _malformed(message: str, index: Optional[int]) -> NoReturn:
    logger.error("%s (document %s)", message, index)
    raise MalformedScorePayloadError(message, context={"index": index})


__all__ = ["PLACEHOLDER_SCORE", "TensorCodec"]
