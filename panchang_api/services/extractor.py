"""Recover Panchang fields from the drikpanchang.com day page.

Two independent strategies run over the same document:

* script variables: ``drikp_g_*`` assignments inside inline scripts, parsed
  as string/number/boolean/JSON literals;
* HTML patterns: an ordered list of label lookups per field (key/value cells,
  labelled spans, ``Label: Value`` text runs), first valid match wins.

Script values take priority on collisions. Every field is optional; the
result is a sparse field map using the same keys as the fallback
calculator.
"""

from __future__ import annotations

import html as html_lib
import json
import logging
import re
from dataclasses import dataclass, field
from datetime import date as date_cls
from typing import Any, Dict, Iterable, List, NamedTuple, Optional, Tuple

from bs4 import BeautifulSoup

from .drik_client import DrikPanchangClient, SourceUnavailable, TransportTimeout
from .timeutil import minutes_to_time, normalize_clock, normalize_span
from .util.deadline import Deadline


logger = logging.getLogger(__name__)

FieldMap = Dict[str, Any]

ELEMENTS = ("tithi", "nakshatra", "yoga", "karana")
NAME_FIELDS = ELEMENTS + tuple(f"{e}_next" for e in ELEMENTS) + ("weekday", "paksha", "masa", "rashi", "ayana", "ritu")
CLOCK_FIELDS = ("sunrise", "sunset", "moonrise", "moonset") + tuple(f"{e}_end" for e in ELEMENTS)
SPAN_FIELDS = (
    "abhijit_muhurat",
    "amrit_kaal",
    "brahma_muhurat",
    "rahu_kaal",
    "yamaganda_kaal",
    "gulika_kaal",
    "dur_muhurat",
)
LIST_FIELDS = ("festivals", "vrats")
CORE_FIELDS = ("tithi", "nakshatra", "yoga", "karana", "sunrise", "sunset")

PLACEHOLDERS = {
    "",
    "-",
    "--",
    "n/a",
    "na",
    "none",
    "null",
    "undefined",
    "unknown",
    "weekday",
    "element",
    "loading...",
}
_SUSPICIOUS = ("function", "script", "{", "}", "=>", "var ")
MAX_VALUE_LENGTH = 80
MAX_LIST_ITEMS = 10

# Normalised script variable (prefix and trailing underscore removed) -> field.
SCRIPT_FIELD_MAP = {
    "tithi_name": "tithi",
    "tithi_hhmm": "tithi_end",
    "tailed_tithi_name": "tithi_next",
    "next_tithi_name": "tithi_next",
    "nakshatra_name": "nakshatra",
    "nakshatra_hhmm": "nakshatra_end",
    "tailed_nakshatra_name": "nakshatra_next",
    "next_nakshatra_name": "nakshatra_next",
    "yoga_name": "yoga",
    "yoga_hhmm": "yoga_end",
    "tailed_yoga_name": "yoga_next",
    "next_yoga_name": "yoga_next",
    "karana_name": "karana",
    "karana_hhmm": "karana_end",
    "tailed_karana_name": "karana_next",
    "next_karana_name": "karana_next",
    "sunrise_hhmm": "sunrise",
    "sunset_hhmm": "sunset",
    "moonrise_hhmm": "moonrise",
    "moonset_hhmm": "moonset",
    "weekday_name": "weekday",
    "vaara_name": "weekday",
    "paksha_name": "paksha",
    "masa_name": "masa",
    "amanta_month_name": "masa",
    "moon_rashi_name": "rashi",
    "moonsign_name": "rashi",
    "rashi_name": "rashi",
    "ayana_name": "ayana",
    "ritu_name": "ritu",
    "drik_ritu_name": "ritu",
    "rahu_kalam_hhmm": "rahu_kaal",
    "rahu_kaal_hhmm": "rahu_kaal",
    "gulika_kalam_hhmm": "gulika_kaal",
    "gulikai_kalam_hhmm": "gulika_kaal",
    "yamaganda_hhmm": "yamaganda_kaal",
    "yamaganda_kalam_hhmm": "yamaganda_kaal",
    "abhijit_muhurta_hhmm": "abhijit_muhurat",
    "brahma_muhurta_hhmm": "brahma_muhurat",
    "amrit_kalam_hhmm": "amrit_kaal",
    "amrit_kaal_hhmm": "amrit_kaal",
    "dur_muhurtam_hhmm": "dur_muhurat",
    "dosha_intervals": "dosha_intervals",
    "festivals": "festivals",
    "festival_list": "festivals",
    "vrats": "vrats",
    "vrat_list": "vrats",
}

# Numeric minute variants, used when the matching ``*_hhmm`` is missing.
SCRIPT_MINUTES_MAP = {
    "sunrise_mins": "sunrise",
    "sunset_mins": "sunset",
    "moonrise_mins": "moonrise",
    "moonset_mins": "moonset",
    "tithi_mins": "tithi_end",
    "nakshatra_mins": "nakshatra_end",
    "yoga_mins": "yoga_end",
    "karana_mins": "karana_end",
}

HTML_FIELD_LABELS: Dict[str, Tuple[str, ...]] = {
    "tithi": ("Tithi",),
    "nakshatra": ("Nakshatra",),
    "yoga": ("Yoga",),
    "karana": ("Karana",),
    "weekday": ("Weekday", "Vaara", "Vara"),
    "paksha": ("Paksha",),
    "masa": ("Amanta Month", "Amanta", "Masa"),
    "rashi": ("Moonsign", "Moon Sign", "Chandra Rashi", "Rashi"),
    "ayana": ("Ayana",),
    "ritu": ("Drik Ritu", "Ritu"),
    "sunrise": ("Sunrise",),
    "sunset": ("Sunset",),
    "moonrise": ("Moonrise",),
    "moonset": ("Moonset",),
    "rahu_kaal": ("Rahu Kalam", "Rahu Kaal"),
    "gulika_kaal": ("Gulikai Kalam", "Gulika Kalam", "Gulika Kaal"),
    "yamaganda_kaal": ("Yamaganda", "Yama Ganda"),
    "abhijit_muhurat": ("Abhijit Muhurta", "Abhijit Muhurat", "Abhijit"),
    "brahma_muhurat": ("Brahma Muhurta", "Brahma Muhurat"),
    "amrit_kaal": ("Amrit Kalam", "Amrit Kaal"),
    "dur_muhurat": ("Dur Muhurtam", "Dur Muhurat"),
}

_SCRIPT_ASSIGN_RE = re.compile(
    r"""(?:[\w$]+\.)?(drikp_g_\w+)\s*=\s*("(?:[^"\\]|\\.)*"|'(?:[^'\\]|\\.)*'|[^;]+)\s*;"""
)
_STRIP_BLOCKS_RE = re.compile(r"<(script|style)[^>]*>.*?</\1>|<!--.*?-->", re.I | re.S)
_TAG_RE = re.compile(r"<[^>]+>")
_UPTO_RE = re.compile(r"^(.*?)\s+(?:upto|up to|till|until)\s+(.+)$", re.I)
_CLOCK_TAIL_RE = re.compile(
    r"^\s*\d{1,2}:\d{2}(?::\d{2})?\s*(?:[AaPp]\.?[Mm]\.?)?\s*(?:,\s*([A-Za-z]{3,9}\s+\d{1,2}))?\s*(.*)$"
)


class ElementText(NamedTuple):
    name: str
    end: Optional[str]
    next_name: Optional[str]
    # "Jun 23" when the site states the end date
    end_date: Optional[str] = None


@dataclass
class ExtractionResult:
    fields: FieldMap = field(default_factory=dict)
    status: str = "failed"
    error: Optional[str] = None


def clean_text(text: Optional[str]) -> str:
    if text is None:
        return ""
    text = _TAG_RE.sub(" ", str(text))
    if "&" in text:
        text = html_lib.unescape(text)
    return re.sub(r"\s+", " ", text).strip()


def is_valid_value(value: Any) -> bool:
    if value is None or isinstance(value, bool):
        return False
    text = str(value).strip()
    if not 1 <= len(text) <= MAX_VALUE_LENGTH:
        return False
    if "<" in text or ">" in text:
        return False
    lowered = text.lower()
    if lowered in PLACEHOLDERS:
        return False
    return not any(marker in lowered for marker in _SUSPICIOUS)


def split_name_and_end(text: str) -> ElementText:
    """Split ``"Saptami upto 09:50 PM Ashtami"`` into name, end and next name."""

    text = clean_text(text)
    match = _UPTO_RE.match(text)
    if not match:
        return ElementText(text, None, None)
    name, rest = match.group(1).strip(), match.group(2)
    end = normalize_clock(rest)
    next_name = end_date = None
    tail = _CLOCK_TAIL_RE.match(rest)
    if end and tail:
        end_date = tail.group(1)
        candidate = (tail.group(2) or "").strip(" ,;")
        if candidate and is_valid_value(candidate):
            next_name = candidate
    return ElementText(name, end, next_name, end_date)


def _normalize_key(raw: str) -> str:
    key = raw[len("drikp_g_"):] if raw.startswith("drikp_g_") else raw
    return key.rstrip("_").lower()


def _parse_literal(raw: str) -> Any:
    raw = raw.strip()
    if len(raw) >= 2 and raw[0] == raw[-1] and raw[0] in "'\"":
        return raw[1:-1]
    if raw in ("true", "false"):
        return raw == "true"
    if raw[:1] in "[{":
        for candidate in (raw, raw.replace("'", '"')):
            try:
                return json.loads(candidate)
            except ValueError:
                continue
        return None
    try:
        return int(raw)
    except ValueError:
        pass
    try:
        return float(raw)
    except ValueError:
        return None


def _inline_scripts(html: str, soup: Optional[BeautifulSoup] = None) -> Iterable[str]:
    soup = soup or BeautifulSoup(html, "html.parser")
    for tag in soup.find_all("script"):
        if tag.get("src"):
            continue
        body = tag.string if tag.string is not None else tag.get_text()
        if body:
            yield body


def extract_script_variables(html: str, soup: Optional[BeautifulSoup] = None) -> Dict[str, Any]:
    """Collect ``drikp_g_*`` assignments from inline scripts into a flat map."""

    variables: Dict[str, Any] = {}
    for body in _inline_scripts(html, soup):
        for match in _SCRIPT_ASSIGN_RE.finditer(body):
            value = _parse_literal(match.group(2))
            if value is None:
                continue
            variables[_normalize_key(match.group(1))] = value
    return variables


def _coerce_intervals(value: Any) -> List[Tuple[int, int, List[str]]]:
    intervals: List[Tuple[int, int, List[str]]] = []
    if not isinstance(value, list):
        return intervals
    for item in value:
        if not isinstance(item, (list, tuple)) or len(item) < 2:
            continue
        try:
            start, end = int(item[0]), int(item[1])
        except (TypeError, ValueError):
            continue
        tags = item[2] if len(item) > 2 and isinstance(item[2], list) else []
        intervals.append((start, end, [str(t) for t in tags if str(t).strip()]))
    return intervals


def _coerce_list(value: Any) -> List[str]:
    if isinstance(value, str):
        value = re.split(r"[,;|]", value)
    if not isinstance(value, list):
        return []
    items: List[str] = []
    for item in value:
        text = clean_text(item) if isinstance(item, str) else ""
        if is_valid_value(text) and text not in items:
            items.append(text)
    return items[:MAX_LIST_ITEMS]


def coerce_field(key: str, value: Any) -> Any:
    """Normalise one raw value for ``key``; ``None`` when unusable."""

    if key == "dosha_intervals":
        return _coerce_intervals(value) or None
    if key in LIST_FIELDS:
        return _coerce_list(value) or None
    if key in CLOCK_FIELDS:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return minutes_to_time(int(value))
        return normalize_clock(value) if isinstance(value, str) else None
    if key in SPAN_FIELDS:
        return normalize_span(value) if isinstance(value, str) else None
    if isinstance(value, str):
        text = clean_text(value)
        if key in ELEMENTS:
            # keep "name upto time next" intact for _expand_elements
            return text if is_valid_value(split_name_and_end(text).name) else None
        return text if is_valid_value(text) else None
    return None


def script_fields(variables: Dict[str, Any]) -> FieldMap:
    fields: FieldMap = {}
    for var, key in SCRIPT_MINUTES_MAP.items():
        if var in variables:
            coerced = coerce_field(key, variables[var])
            if coerced is not None:
                fields[key] = coerced
    for var, key in SCRIPT_FIELD_MAP.items():
        if var in variables:
            coerced = coerce_field(key, variables[var])
            if coerced is not None:
                fields[key] = coerced
    return fields


def label_cells(soup: BeautifulSoup) -> Dict[str, str]:
    """Map label text to value text for key/value cell layouts."""

    cells: Dict[str, str] = {}
    for key_el in soup.find_all(class_=re.compile(r"dpTableKey", re.I)):
        value_el = key_el.find_next_sibling(class_=re.compile(r"dpTableValue", re.I))
        if value_el is not None:
            cells.setdefault(clean_text(key_el.get_text(" ")).lower(), value_el.get_text(" "))
    for row in soup.find_all("tr"):
        row_cells = row.find_all(["th", "td"], recursive=False)
        if len(row_cells) == 2:
            cells.setdefault(clean_text(row_cells[0].get_text(" ")).lower(), row_cells[1].get_text(" "))
    return cells


def _label_patterns(label: str) -> List[Tuple[str, re.Pattern]]:
    escaped = re.escape(label)
    patterns = [("markup", re.compile(rf"<td[^>]*>\s*{escaped}\s*</td>\s*<td[^>]*>(.*?)</td>", re.I | re.S))]
    if " " not in label:
        css = re.escape(label.lower())
        patterns.append(
            ("markup", re.compile(rf"<span[^>]*class=\"(?:[^\"]*\s)?{css}(?:\s[^\"]*)?\"[^>]*>([^<]+)</span>", re.I))
        )
    patterns.extend(
        [
            ("text", re.compile(rf"^\s*{escaped}\s*[:\-]\s*(.+?)\s*$", re.I | re.M)),
            ("text", re.compile(rf"{escaped}[^:\n]*:\s*([^\n]+)", re.I)),
        ]
    )
    return patterns


def _collect_marked(soup: BeautifulSoup, marker: str) -> List[str]:
    found: List[str] = []
    for el in soup.find_all(class_=re.compile(marker, re.I)):
        text = clean_text(el.get_text(" "))
        if 3 < len(text) < 100 and is_valid_value(text) and text not in found:
            found.append(text)
    return found[:MAX_LIST_ITEMS]


def extract_html_fields(html: str, soup: Optional[BeautifulSoup] = None) -> FieldMap:
    """Apply the ordered label patterns to cells, markup and the text view."""

    soup = soup or BeautifulSoup(html, "html.parser")
    cells = label_cells(soup)
    views = {
        "markup": _STRIP_BLOCKS_RE.sub(" ", html),
        "text": "\n".join(line.strip() for line in soup.get_text("\n").splitlines() if line.strip()),
    }

    fields: FieldMap = {}
    for key, labels in HTML_FIELD_LABELS.items():
        candidates: List[str] = [cells[label.lower()] for label in labels if label.lower() in cells]
        for label in labels:
            for view, pattern in _label_patterns(label):
                match = pattern.search(views[view])
                if match:
                    candidates.append(match.group(1))
        for candidate in candidates:
            coerced = coerce_field(key, candidate)
            if coerced is not None:
                fields[key] = coerced
                break

    festivals = _collect_marked(soup, "festival")
    if festivals:
        fields["festivals"] = festivals
    vrats = _collect_marked(soup, "vrat")
    if vrats:
        fields["vrats"] = vrats
    return fields


def _expand_elements(fields: FieldMap) -> FieldMap:
    """Split ``name upto time next`` element values into their parts."""

    for element in ELEMENTS:
        raw = fields.get(element)
        if not raw:
            continue
        parts = split_name_and_end(raw)
        if not is_valid_value(parts.name):
            fields.pop(element)
            continue
        fields[element] = parts.name
        if parts.end and not fields.get(f"{element}_end"):
            fields[f"{element}_end"] = parts.end
            if parts.end_date:
                fields[f"{element}_end_date"] = parts.end_date
        if parts.next_name and not fields.get(f"{element}_next"):
            fields[f"{element}_next"] = split_name_and_end(parts.next_name).name
    return fields


def extract(html: str) -> FieldMap:
    """Run both strategies; script values override HTML values."""

    soup = BeautifulSoup(html, "html.parser")
    fields = extract_html_fields(html, soup)
    from_scripts = script_fields(extract_script_variables(html, soup))
    fields.update({k: v for k, v in from_scripts.items() if v not in (None, "", [])})
    return _expand_elements(fields)


def classify(fields: FieldMap) -> str:
    if not fields:
        return "failed"
    if all(fields.get(k) for k in CORE_FIELDS):
        return "ok"
    return "partial"


def extract_for_day(
    client: DrikPanchangClient,
    target: date_cls,
    city: str,
    deadline: Optional[Deadline] = None,
) -> ExtractionResult:
    """Fetch and extract one day; transport failures yield an empty map."""

    try:
        html = client.fetch_day(target, city, deadline=deadline)
    except TransportTimeout as exc:
        logger.warning("panchang.extract.timeout", extra={"city": city, "date": target.isoformat(), "error": str(exc)})
        return ExtractionResult(status="failed", error=f"timeout: {exc}")
    except SourceUnavailable as exc:
        logger.warning("panchang.extract.unavailable", extra={"city": city, "date": target.isoformat(), "error": str(exc)})
        return ExtractionResult(status="failed", error=str(exc))

    fields = extract(html)
    status = classify(fields)
    logger.info(
        "panchang.extract.done",
        extra={"city": city, "date": target.isoformat(), "status": status, "fields": sorted(fields)},
    )
    return ExtractionResult(fields=fields, status=status)
