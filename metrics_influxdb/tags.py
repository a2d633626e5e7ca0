"""Parsing and merging of InfluxDB tags.

Tags arrive from several sources (global tags, per-metric tags, the item
name of a metric set).  They are flattened in source order and merged so
that a later tag overrides an earlier tag with the same key.

Parsing is lenient: a malformed tag is dropped, it never aborts a write.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from typing import Any, Union

from metrics_influxdb.models import EMPTY_TAG, InfluxTag
from metrics_influxdb.text import UNESC_COMMA_RE, UNESC_EQUAL_RE

logger = logging.getLogger(__name__)

NAME_TAG_KEY = "Name"

# A mapping of key -> value, or an ordered sequence of (key, value) pairs.
TagSource = Union[Mapping[str, Any], Iterable[tuple[Any, Any]]]


def _pairs(source: TagSource) -> Iterable[tuple[Any, Any]]:
    if isinstance(source, Mapping):
        return source.items()
    return source


def _is_blank(value: Any) -> bool:
    return value is None or not str(value).strip()


def to_tag(pair: tuple[Any, Any]) -> InfluxTag:
    """Build a tag from a ``(key, value)`` pair, trimming both sides.

    Returns ``EMPTY_TAG`` if the key or value is missing or blank.
    """
    try:
        key, value = pair
    except (TypeError, ValueError):
        logger.debug("Dropping malformed tag pair %r", pair)
        return EMPTY_TAG
    if _is_blank(key) or _is_blank(value):
        logger.debug("Dropping malformed tag %r=%r", key, value)
        return EMPTY_TAG
    return InfluxTag(key=str(key).strip(), value=str(value).strip())


class TagSequence(Iterable[InfluxTag]):
    """Lazy, re-iterable view over the valid tags of several sources."""

    def __init__(self, sources: Iterable[TagSource]) -> None:
        # Materialize one-shot iterators so the view can be iterated again.
        self._sources = tuple(
            s if isinstance(s, Mapping) else tuple(s) for s in sources
        )

    def __iter__(self) -> Iterator[InfluxTag]:
        for source in self._sources:
            for pair in _pairs(source):
                tag = to_tag(pair)
                if not tag.is_empty:
                    yield tag

    def __repr__(self) -> str:
        return f"TagSequence({list(self)!r})"


def to_tags(sources: Iterable[TagSource]) -> TagSequence:
    """Flatten *sources* into their valid tags, in source then pair order."""
    return TagSequence(sources)


def split_item_name(item_name: str | None) -> list[tuple[str, str]]:
    """Split an item name into raw ``(key, value)`` pairs.

    The item name is a comma-separated list of ``key=value`` pairs.  Segments
    that are not pairs are ignored, unless the name is a single segment: then
    it becomes ``("Name", item_name)`` so the series still carries an
    identifying tag.  Escaped commas and equals signs do not split.
    """
    name = item_name or ""
    segments = UNESC_COMMA_RE.split(name)
    pairs: list[tuple[str, str]] = []
    for segment in segments:
        parts = UNESC_EQUAL_RE.split(segment, maxsplit=1)
        if len(parts) == 2:
            pairs.append((parts[0], parts[1]))
    if len(segments) == 1 and not pairs:
        return [(NAME_TAG_KEY, name)]
    return pairs


def join_tags(
    sources: Iterable[TagSource], item_name: str | None = None
) -> list[InfluxTag]:
    """Merge *sources* and the tags parsed from *item_name* into one tag per key.

    Tags later in the sequence override earlier tags with the same key, so the
    item-name tags win over the explicit sources.  Keys keep the position in
    which they were first seen.
    """
    all_tags = to_tags([*sources, split_item_name(item_name)])
    merged: dict[str, InfluxTag] = {}
    for tag in all_tags:
        merged[tag.key] = tag
    return list(merged.values())
