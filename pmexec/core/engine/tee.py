"""
Stream tee — copy a byte stream to a live sink and a capture sink.

This is the only place the live/capture ordering rule is enforced:
both writes for a chunk complete before the next chunk is pulled
from the source, so the two sinks can differ in latency but never in
content. With ``mute`` the live sink is skipped entirely.
"""

from __future__ import annotations

import codecs
import io
import logging
import sys
from typing import Iterable, Protocol, TextIO

from pmexec.core.errors import ExecError, IoFailure

logger = logging.getLogger(__name__)


class Sink(Protocol):
    """Anything bytes can be written to."""

    def write(self, data: bytes, /) -> object: ...

    def flush(self) -> object: ...


class TextSink:
    """Bytes-to-text adapter for streams without a ``.buffer``.

    ``io.StringIO`` redirects and embedding hosts hand us text streams.
    Chunks are decoded incrementally, so a UTF-8 sequence split across
    two reads is not mangled.
    """

    def __init__(self, stream: TextIO) -> None:
        self._stream = stream
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")

    def write(self, data: bytes, /) -> int:
        self._stream.write(self._decoder.decode(data))
        return len(data)

    def flush(self) -> None:
        self._stream.flush()


def _binary_view(stream: TextIO) -> Sink:
    stream.flush()
    buffer = getattr(stream, "buffer", None)
    return buffer if buffer is not None else TextSink(stream)


def stdout_sink() -> Sink:
    """Binary view of the current ``sys.stdout``."""
    return _binary_view(sys.stdout)


def stderr_sink() -> Sink:
    """Binary view of the current ``sys.stderr``."""
    return _binary_view(sys.stderr)


def tee(
    source: Iterable[bytes],
    live: Sink,
    capture: io.BytesIO | None = None,
    *,
    mute: bool = False,
) -> bytes:
    """Copy every chunk of ``source`` to ``live`` and ``capture``.

    Args:
        source: Sequential byte chunks (e.g. a merged pipe reader).
        live: Sink shown to the user — usually stdout or stderr.
        capture: Accumulating sink; a fresh ``BytesIO`` if omitted.
        mute: When True, nothing is written to ``live``.

    Returns:
        The full contents of the capture sink.

    Raises:
        IoFailure: A read or write failed. Partial capture is dropped.
    """
    capture = capture if capture is not None else io.BytesIO()

    try:
        for chunk in source:
            if not mute:
                live.write(chunk)
                live.flush()
            capture.write(chunk)
    except ExecError:
        raise
    except (OSError, ValueError, TypeError) as e:
        raise IoFailure(f"Failed to copy child output: {e}") from e

    contents = capture.getvalue()
    logger.debug("Tee finished: %d bytes captured (mute=%s)", len(contents), mute)
    return contents
