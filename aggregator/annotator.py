"""Exposition-format label injection.

Sample lines are rewritten textually: the producer's labels are inserted right
after the first ``{`` of a line, or a brace block is synthesized for
``name value`` lines. Comments and anything that does not look like a sample
are passed through untouched, so unexpected producer output is preserved
rather than rejected.

Bytes are decoded with ``surrogateescape``: invalid UTF-8 from a producer
survives as lone surrogates and is restored by :func:`encode_document`.
"""

from typing import AsyncIterable, AsyncIterator, Iterable, Iterator


def _as_text(line: str | bytes) -> str:
    if isinstance(line, bytes):
        line = line.decode("utf-8", errors="surrogateescape")
    return line.rstrip("\r\n")


def encode_document(text: str) -> bytes:
    """Encode annotated text back to the producers' original bytes."""
    return text.encode("utf-8", errors="surrogateescape")


def annotate_line(line: str | bytes, label_text: str) -> str:
    """Return ``line`` with ``label_text`` injected, newline-terminated."""
    line = _as_text(line)

    # HELP text may contain braces; comments are never rewritten.
    if line.startswith("#"):
        return f"{line}\n"

    position = line.find("{")
    if position != -1:
        return f"{line[:position + 1]}{label_text},{line[position + 1:]}\n"

    tokens = line.split()
    if len(tokens) == 2:
        name, value = tokens
        return f"{name}{{{label_text}}} {value}\n"

    return f"{line}\n"


def annotate(lines: Iterable[str | bytes], label_text: str) -> Iterator[str]:
    """Lazily annotate a line stream, one output line per input line."""
    for line in lines:
        yield annotate_line(line, label_text)


async def annotate_async(
    lines: AsyncIterable[str | bytes], label_text: str
) -> AsyncIterator[str]:
    """Async counterpart of :func:`annotate` for streamed response bodies."""
    async for line in lines:
        yield annotate_line(line, label_text)
