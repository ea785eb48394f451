"""Static festival and vrat candidates used when nothing was scraped."""

from __future__ import annotations

from datetime import date as date_cls
from typing import Dict, Iterable, List, Optional

from .tables import AMAVASYA, KRISHNA, SHUKLA

MONTHLY_FESTIVALS: Dict[int, List[str]] = {
    1: ["Makar Sankranti", "Vasant Panchami"],
    2: ["Maha Shivratri", "Holi"],
    3: ["Ram Navami", "Hanuman Jayanti"],
    4: ["Akshaya Tritiya", "Buddha Purnima"],
    5: ["Ganga Dussehra", "Jagannath Rath Yatra"],
    6: ["Guru Purnima", "Shravan Somwar"],
    7: ["Raksha Bandhan", "Krishna Janmashtami"],
    8: ["Ganesh Chaturthi", "Pitru Paksha"],
    9: ["Navratri", "Dussehra"],
    10: ["Karva Chauth", "Diwali"],
    11: ["Govardhan Puja", "Bhai Dooj"],
    12: ["Gita Jayanti", "Vivah Panchami"],
}

WEEKDAY_VRATS: Dict[str, List[str]] = {
    "Sunday": ["Ravivar Vrat", "Surya Vrat"],
    "Monday": ["Somvar Vrat", "Solah Somvar Vrat"],
    "Tuesday": ["Mangalvar Vrat", "Hanuman Vrat"],
    "Wednesday": ["Budhvar Vrat", "Ganesha Vrat"],
    "Thursday": ["Brihaspativar Vrat", "Guru Vrat"],
    "Friday": ["Shukravar Vrat", "Lakshmi Vrat"],
    "Saturday": ["Shanivar Vrat", "Shani Vrat"],
}

# (tithi, paksha or None for both) -> observance
TITHI_VRATS = {
    ("Chaturthi", SHUKLA): "Vinayaka Chaturthi",
    ("Chaturthi", KRISHNA): "Sankashti Chaturthi",
    ("Ekadashi", None): "Ekadashi Vrat",
    ("Trayodashi", None): "Pradosh Vrat",
    ("Chaturdashi", KRISHNA): "Masik Shivaratri",
    ("Purnima", None): "Purnima Vrat",
    (AMAVASYA, None): "Amavasya Vrat",
}


def festivals_for_date(target: date_cls) -> List[str]:
    return list(MONTHLY_FESTIVALS.get(target.month, []))


def vrats_for_day(weekday: str, tithi: Optional[str] = None, paksha: Optional[str] = None) -> List[str]:
    vrats = list(WEEKDAY_VRATS.get(weekday, []))
    if tithi:
        observance = TITHI_VRATS.get((tithi, paksha)) or TITHI_VRATS.get((tithi, None))
        if observance:
            vrats.insert(0, observance)
    return vrats


def merge_names(*groups: Optional[Iterable[str]]) -> List[str]:
    """Concatenate name lists, dropping blanks and case-insensitive duplicates."""

    merged: List[str] = []
    seen = set()
    for group in groups:
        for name in group or []:
            text = str(name).strip()
            key = text.lower()
            if not text or key in seen:
                continue
            seen.add(key)
            merged.append(text)
    return merged
