"""Incremental JSONL framing for agent stdout.

Chunks arrive at arbitrary boundaries (mid-line, mid-character); the parser
buffers raw bytes and only decodes complete lines, so the records it yields
do not depend on how the stream was split.
"""

from __future__ import annotations

import json
import logging
from typing import Any, List

logger = logging.getLogger(__name__)


class JsonLineParser:
    """Reassemble newline-delimited JSON records from a byte stream."""

    def __init__(self) -> None:
        self._buffer = b""
        self._closed = False

    def feed(self, chunk: bytes) -> List[Any]:
        """Consume one chunk and return the records of every line it completes."""
        if self._closed:
            raise RuntimeError("JsonLineParser is closed")
        if not chunk:
            return []
        self._buffer += chunk
        *lines, self._buffer = self._buffer.split(b"\n")
        records: List[Any] = []
        for raw in lines:
            self._decode_into(raw, records)
        return records

    def close(self) -> List[Any]:
        """Flush the trailing fragment left by a stream that did not end with a newline."""
        if self._closed:
            return []
        self._closed = True
        records: List[Any] = []
        if self._buffer:
            self._decode_into(self._buffer, records)
            self._buffer = b""
        return records

    @staticmethod
    def _decode_into(raw: bytes, records: List[Any]) -> None:
        text = raw.decode("utf-8", errors="replace").strip()
        if not text:
            return
        try:
            records.append(json.loads(text))
        except json.JSONDecodeError:
            # Non-protocol noise on the same channel
            logger.debug("Dropping non-JSON line: %.200s", text)
