"""Scan engine: reports which rules occur in a block of text.

Provides:
  - ``SensitiveDataMatch``: frozen dataclass, category + pattern name only.
  - ``scan_text()``: small-input path, synchronous, never suspends.
  - ``scan_text_chunked()``: large-input path, walks overlapping windows and
    yields to the event loop between windows.
  - ``scan()``: dispatches between the two by input length.
  - ``to_scannable()``: replaces code points UTF-8 cannot encode (lone
    surrogates) so re2 never rejects the input.

The engine reports PRESENCE. A matcher stops at its first hit, and at most one
match is emitted per pattern name per call. Matched text, offsets and counts
are never returned or stored.

Concurrency:
  The only suspension point is ``await yield_control()`` between windows of
  ``scan_text_chunked()``. The engine reads nothing but the matcher tuple it
  was handed, so scans interleaved on the same loop do not interfere, and a
  cache invalidation during a scan does not affect the scan in progress.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable, Iterator, Sequence

from leakguard.constants import CHUNK_OVERLAP, CHUNK_SIZE
from leakguard.scanner.compiler import CompiledMatcher


@dataclass(frozen=True)
class SensitiveDataMatch:
    """One rule that matched somewhere in the scanned text.

    Fields:
        category:     DetectionRule.category of the matching rule.
        pattern_name: DetectionRule.name of the matching rule.
    """

    category: str
    pattern_name: str


def to_scannable(text: str) -> str:
    """Return ``text`` with every lone surrogate replaced by U+FFFD.

    re2 encodes its input as strict UTF-8, and ``json.loads`` happily returns
    strings holding unpaired ``\\ud800``-style escapes. Length is preserved,
    so window offsets computed on the result match the caller's text.
    """
    try:
        text.encode("utf-8")
    except UnicodeEncodeError:
        return "".join("\ufffd" if "\ud800" <= ch <= "\udfff" else ch for ch in text)
    return text


async def yield_to_event_loop() -> None:
    """Hand control back to the asyncio scheduler for one iteration."""
    await asyncio.sleep(0)


def iter_windows(
    text: str,
    chunk_size: int = CHUNK_SIZE,
    overlap: int = CHUNK_OVERLAP,
) -> Iterator[str]:
    """Yield successive scan windows over ``text``.

    Window starts advance by ``chunk_size``; each window also includes the next
    ``overlap`` characters so an occurrence straddling a boundary is seen whole.
    Empty text yields nothing.
    """
    offset = 0
    while offset < len(text):
        yield text[offset:offset + chunk_size + overlap]
        offset += chunk_size


def scan_text(text: str, matchers: Sequence[CompiledMatcher]) -> list[SensitiveDataMatch]:
    """Small-input path: test each matcher once against the whole text.

    Matchers are tried in order. When several matchers share a name, the first
    one that matches wins and later ones are skipped.

    Returns:
        Matches in first-seen order; never two with the same pattern_name.
    """
    matches: list[SensitiveDataMatch] = []
    seen: set[str] = set()

    for matcher in matchers:
        if matcher.name in seen:
            continue
        if matcher.search(text):
            seen.add(matcher.name)
            matches.append(SensitiveDataMatch(category=matcher.category, pattern_name=matcher.name))

    return matches


async def scan_text_chunked(
    text: str,
    matchers: Sequence[CompiledMatcher],
    *,
    chunk_size: int = CHUNK_SIZE,
    overlap: int = CHUNK_OVERLAP,
    yield_control: Callable[[], Awaitable[None]] = yield_to_event_loop,
) -> list[SensitiveDataMatch]:
    """Large-input path: per matcher, walk the text window by window.

    Outer loop by matcher, inner loop by window. A matcher stops at its first
    matching window. Between windows (never after the last window, never after
    a hit) ``yield_control()`` is awaited so other tasks can run. Large inputs
    are therefore walked once per not-yet-matched pattern: more total work in
    exchange for bounded time slices.

    Args:
        text:          Input text.
        matchers:      Snapshot of compiled matchers, in priority order.
        chunk_size:    Window stride in characters.
        overlap:       Extra characters appended to each window.
        yield_control: Awaitable factory invoked at each suspension point.

    Returns:
        Matches in first-seen order; never two with the same pattern_name.
    """
    matches: list[SensitiveDataMatch] = []
    seen: set[str] = set()

    for matcher in matchers:
        if matcher.name in seen:
            continue

        windows = iter_windows(text, chunk_size, overlap)
        window = next(windows, None)
        while window is not None:
            if matcher.search(window):
                seen.add(matcher.name)
                matches.append(SensitiveDataMatch(category=matcher.category, pattern_name=matcher.name))
                break

            window = next(windows, None)
            if window is not None:
                await yield_control()

    return matches


async def scan(text: str, matchers: Sequence[CompiledMatcher]) -> list[SensitiveDataMatch]:
    """Scan ``text`` with ``matchers``, choosing the path by input length.

    INVARIANTS:
      - Zero matchers -> ``[]`` without looking at the text.
      - Lone surrogates are replaced before dispatch; never raises on text.
      - ``len(text) <= CHUNK_SIZE`` -> ``scan_text()``; never suspends.
      - Longer input -> ``scan_text_chunked()`` with the default window sizes.
    """
    if not matchers:
        return []
    text = to_scannable(text)
    if len(text) <= CHUNK_SIZE:
        return scan_text(text, matchers)
    return await scan_text_chunked(text, matchers)
