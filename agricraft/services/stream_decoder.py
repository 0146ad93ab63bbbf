import codecs
import json
import logging
from typing import AsyncIterable, Iterable, List, Optional

from ..schemas import CONFIDENCE_LEVELS, DETECTED_TYPES, ClassificationRecord

logger = logging.getLogger(__name__)

DATA_PREFIX = "data: "

FALLBACK_TYPE = "unknown"
FALLBACK_CONFIDENCE = "low"
FALLBACK_GUIDANCE = "No guidance available."


def _fragment(payload) -> Optional[str]:
    # candidates[0].content.parts[0].text
    try:
        text = payload["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        return None
    return text if isinstance(text, str) and text else None


class StreamAccumulator:
    """
    Collects text fragments from a server-sent-event body, one chunk at a time.

    Lines and multi-byte characters may be split across chunks; the
    incomplete tail is held back until the next chunk (or finish()).
    """

    def __init__(self):
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._pending = ""
        self._parts: List[str] = []

    @property
    def text(self) -> str:
        return "".join(self._parts)

    def feed(self, chunk: bytes) -> None:
        self._pending += self._decoder.decode(chunk)
        *lines, self._pending = self._pending.split("\n")
        for line in lines:
            self._handle_line(line)

    def finish(self) -> str:
        self._pending += self._decoder.decode(b"", final=True)
        if self._pending:
            self._handle_line(self._pending)
            self._pending = ""
        return self.text

    def _handle_line(self, line: str) -> None:
        line = line.rstrip("\r")
        if not line.startswith(DATA_PREFIX):
            return
        raw = line[len(DATA_PREFIX):]
        if not raw.strip():
            return
        try:
            payload = json.loads(raw)
        except ValueError as e:
            logger.warning("Failed to parse SSE data: %s", e)
            return
        text = _fragment(payload)
        if text is not None:
            self._parts.append(text)


# ---------- labeled-field extraction ----------

def _is_word_char(ch: str) -> bool:
    return ch.isalnum() or ch == "_"


def _label_offsets(text: str, label: str):
    """Yield the index just past every case-insensitive occurrence of label."""
    # compare window by window; lower() on the whole text can change its length
    needle = label.casefold()
    width = len(label)
    for start in range(len(text) - width + 1):
        if text[start:start + width].casefold() == needle:
            yield start + width


def _skip_space(text: str, pos: int) -> int:
    while pos < len(text) and text[pos].isspace():
        pos += 1
    return pos


def extract_token(text: str, label: str) -> Optional[str]:
    """First word token following label, lower-cased."""
    for pos in _label_offsets(text, label):
        pos = _skip_space(text, pos)
        end = pos
        while end < len(text) and _is_word_char(text[end]):
            end += 1
        if end > pos:
            return text[pos:end].lower()
    return None


def extract_block(text: str, label: str) -> Optional[str]:
    """Text following label up to the first blank line or end of text, stripped."""
    for pos in _label_offsets(text, label):
        rest = text[_skip_space(text, pos):]
        if not rest:
            continue
        end = rest.find("\n\n")
        block = (rest if end == -1 else rest[:end]).strip()
        if block:
            return block
    return None


def parse_classification(text: str) -> ClassificationRecord:
    detected = extract_token(text, "DETECTED TYPE:")
    confidence = extract_token(text, "CONFIDENCE:")
    guidance = extract_block(text, "GUIDANCE:")

    if detected not in DETECTED_TYPES:
        if detected:
            logger.warning("Unrecognised detected type %r, falling back to %s", detected, FALLBACK_TYPE)
        detected = FALLBACK_TYPE
    if confidence not in CONFIDENCE_LEVELS:
        if confidence:
            logger.warning("Unrecognised confidence %r, falling back to %s", confidence, FALLBACK_CONFIDENCE)
        confidence = FALLBACK_CONFIDENCE

    return ClassificationRecord(
        detected_type=detected,
        confidence=confidence,
        guidance=guidance or FALLBACK_GUIDANCE,
        full_response=text,
    )


def decode(chunks: Iterable[bytes]) -> ClassificationRecord:
    acc = StreamAccumulator()
    for chunk in chunks:
        acc.feed(chunk)
    return parse_classification(acc.finish())


async def decode_stream(chunks: AsyncIterable[bytes]) -> ClassificationRecord:
    acc = StreamAccumulator()
    async for chunk in chunks:
        acc.feed(chunk)
    return parse_classification(acc.finish())
