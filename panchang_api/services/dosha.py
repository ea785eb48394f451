"""Dosha intervals: tagged time windows partitioning the day."""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Sequence, Tuple

from .timeutil import MINUTES_PER_DAY, minutes_to_time, parse_span, time_to_minutes

Triple = Tuple[int, int, Sequence[str]]

AVOID_TAGS = {"Rahu", "T Randhra"}
CAUTION_TAGS = {"N Visha", "Yamaganda", "Gulika", "Dur Muhurta"}

DESCRIPTIONS = {
    "Rahu": "Inauspicious time - avoid important activities",
    "T Randhra": "Tithi related dosha - be cautious",
    "N Visha": "Nakshatra related dosha - avoid new beginnings",
    "Nakshatra": "Nakshatra period - generally neutral",
    "Tithi": "Tithi period - generally neutral",
    "Yamaganda": "Yamaganda - avoid travel and new work",
    "Gulika": "Gulika Kaal - avoid auspicious beginnings",
    "Dur Muhurta": "Dur Muhurat - inauspicious muhurta",
}

# Window keys produced by the muhurta helpers and the tag each one carries.
WINDOW_TAGS = {
    "rahu_kaal": "Rahu",
    "yamaganda_kaal": "Yamaganda",
    "gulika_kaal": "Gulika",
    "dur_muhurat": "Dur Muhurta",
}


def severity_for(tags: Iterable[str]) -> str:
    tags = set(tags)
    if tags & AVOID_TAGS:
        return "avoid"
    if tags & CAUTION_TAGS:
        return "caution"
    return "normal"


def description_for(tags: Iterable[str]) -> str:
    known = [DESCRIPTIONS[t] for t in tags if t in DESCRIPTIONS]
    return "; ".join(known) if known else "Normal period"


def build_intervals(
    triples: Iterable[Triple],
    day_start: int = 0,
    day_end: int = MINUTES_PER_DAY,
) -> List[Dict[str, object]]:
    """Partition ``[day_start, day_end)`` at every triple boundary.

    Each piece carries the union of the tags of every triple covering it, so
    the result is sorted and non-overlapping even when the input overlaps.
    Adjacent pieces with identical tags are merged.
    """

    spans = [(int(s), int(e), tuple(tags)) for s, e, tags in triples if int(e) > int(s)]
    if spans:
        day_start = min(day_start, min(s for s, _, _ in spans))
        day_end = max(day_end, max(e for _, e, _ in spans))
    bounds = sorted({day_start, day_end, *(s for s, _, _ in spans), *(e for _, e, _ in spans)})

    pieces: List[Tuple[int, int, List[str]]] = []
    for start, end in zip(bounds, bounds[1:]):
        tags = sorted({t for s, e, ts in spans if s <= start and end <= e for t in ts})
        if pieces and pieces[-1][2] == tags and pieces[-1][1] == start:
            pieces[-1] = (pieces[-1][0], end, tags)
        else:
            pieces.append((start, end, tags))

    return [
        {
            "start": minutes_to_time(start),
            "end": minutes_to_time(end),
            "start_minutes": start,
            "end_minutes": end,
            "tags": tags,
            "severity": severity_for(tags),
            "description": description_for(tags),
        }
        for start, end, tags in pieces
    ]


def triples_from_windows(windows: Dict[str, Tuple[int, int]]) -> List[Triple]:
    return [(start, end, [WINDOW_TAGS[key]]) for key, (start, end) in windows.items() if key in WINDOW_TAGS]


def triples_from_spans(fields: Mapping[str, Any]) -> List[Triple]:
    """Triples for the ``"HH:MM - HH:MM"`` window fields of a record."""

    windows: Dict[str, Tuple[int, int]] = {}
    for key in WINDOW_TAGS:
        span = parse_span(fields.get(key))
        if span is None:
            continue
        start, end = time_to_minutes(span[0]), time_to_minutes(span[1])
        if end <= start:
            end += MINUTES_PER_DAY
        windows[key] = (start, end)
    return triples_from_windows(windows)
