"""Static Panchang enumerations and their lookup helpers.

Five ordered tables are exposed (tithi, nakshatra, yoga, karana, rashi).
``name_for`` resolves a cycle position to a name and ``metadata_for``
resolves a name to its fixed attributes. Lookups never raise: an
unrecognised name yields ``"Unknown"`` for every attribute.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

UNKNOWN = "Unknown"

TITHI_NAMES = [
    "Pratipada",
    "Dwitiya",
    "Tritiya",
    "Chaturthi",
    "Panchami",
    "Shashthi",
    "Saptami",
    "Ashtami",
    "Navami",
    "Dashami",
    "Ekadashi",
    "Dwadashi",
    "Trayodashi",
    "Chaturdashi",
    "Purnima",
]

AMAVASYA = "Amavasya"

TITHI_SANSKRIT = [
    "प्रतिपदा",
    "द्वितीया",
    "तृतीया",
    "चतुर्थी",
    "पंचमी",
    "षष्ठी",
    "सप्तमी",
    "अष्टमी",
    "नवमी",
    "दशमी",
    "एकादशी",
    "द्वादशी",
    "त्रयोदशी",
    "चतुर्दशी",
    "पूर्णिमा",
]

TITHI_DEITIES = [
    "Agni",
    "Brahma",
    "Gauri",
    "Ganesha",
    "Naga",
    "Kartikeya",
    "Surya",
    "Shiva",
    "Durga",
    "Yama",
    "Vishvedevas",
    "Vishnu",
    "Kamadeva",
    "Kali",
    "Chandra",
]

# (name, lord, deity, moon rashi at the end of the nakshatra, sanskrit)
NAKSHATRAS: List[Tuple[str, str, str, str, str]] = [
    ("Ashwini", "Ketu", "Ashwini Kumaras", "Mesha", "अश्विनी"),
    ("Bharani", "Venus", "Yama", "Mesha", "भरणी"),
    ("Krittika", "Sun", "Agni", "Vrishabha", "कृत्तिका"),
    ("Rohini", "Moon", "Brahma", "Vrishabha", "रोहिणी"),
    ("Mrigashira", "Mars", "Soma", "Mithuna", "मृगशिरा"),
    ("Ardra", "Rahu", "Rudra", "Mithuna", "आर्द्रा"),
    ("Punarvasu", "Jupiter", "Aditi", "Karka", "पुनर्वसु"),
    ("Pushya", "Saturn", "Brihaspati", "Karka", "पुष्य"),
    ("Ashlesha", "Mercury", "Sarpa", "Karka", "आश्लेषा"),
    ("Magha", "Ketu", "Pitrs", "Simha", "मघा"),
    ("Purva Phalguni", "Venus", "Bhaga", "Simha", "पूर्वा फाल्गुनी"),
    ("Uttara Phalguni", "Sun", "Aryaman", "Kanya", "उत्तरा फाल्गुनी"),
    ("Hasta", "Moon", "Savitar", "Kanya", "हस्त"),
    ("Chitra", "Mars", "Vishvakarma", "Tula", "चित्रा"),
    ("Swati", "Rahu", "Vayu", "Tula", "स्वाती"),
    ("Vishakha", "Jupiter", "Indra-Agni", "Vrishchika", "विशाखा"),
    ("Anuradha", "Saturn", "Mitra", "Vrishchika", "अनुराधा"),
    ("Jyeshtha", "Mercury", "Indra", "Vrishchika", "ज्येष्ठा"),
    ("Mula", "Ketu", "Nirrti", "Dhanu", "मूल"),
    ("Purva Ashadha", "Venus", "Apas", "Dhanu", "पूर्वाषाढ़ा"),
    ("Uttara Ashadha", "Sun", "Vishve Devas", "Makara", "उत्तराषाढ़ा"),
    ("Shravana", "Moon", "Vishnu", "Makara", "श्रवण"),
    ("Dhanishta", "Mars", "Vasus", "Kumbha", "धनिष्ठा"),
    ("Shatabhisha", "Rahu", "Varuna", "Kumbha", "शतभिषा"),
    ("Purva Bhadrapada", "Jupiter", "Aja Ekapada", "Meena", "पूर्वा भाद्रपद"),
    ("Uttara Bhadrapada", "Saturn", "Ahir Budhnya", "Meena", "उत्तरा भाद्रपद"),
    ("Revati", "Mercury", "Pushan", "Meena", "रेवती"),
]

# (name, meaning, sanskrit, nature)
YOGAS: List[Tuple[str, str, str, str]] = [
    ("Vishkumbha", "Obstacles", "विष्कम्भ", "inauspicious"),
    ("Preeti", "Love", "प्रीति", "auspicious"),
    ("Ayushman", "Longevity", "आयुष्मान", "auspicious"),
    ("Saubhagya", "Fortune", "सौभाग्य", "auspicious"),
    ("Shobhana", "Auspicious", "शोभन", "auspicious"),
    ("Atiganda", "Great obstacles", "अतिगण्ड", "inauspicious"),
    ("Sukarma", "Good deeds", "सुकर्मा", "auspicious"),
    ("Dhriti", "Resolve", "धृति", "auspicious"),
    ("Shula", "Spear", "शूल", "inauspicious"),
    ("Ganda", "Obstacles", "गण्ड", "inauspicious"),
    ("Vriddhi", "Growth", "वृद्धि", "auspicious"),
    ("Dhruva", "Fixed", "ध्रुव", "auspicious"),
    ("Vyaghata", "Beating", "व्याघात", "inauspicious"),
    ("Harshana", "Joy", "हर्षण", "auspicious"),
    ("Vajra", "Diamond", "वज्र", "inauspicious"),
    ("Siddhi", "Accomplishment", "सिद्धि", "auspicious"),
    ("Vyatipata", "Calamity", "व्यतीपात", "inauspicious"),
    ("Variyana", "Comfort", "वरीयान", "auspicious"),
    ("Parigha", "Iron rod", "परिघ", "inauspicious"),
    ("Shiva", "Auspicious", "शिव", "auspicious"),
    ("Siddha", "Accomplished", "सिद्ध", "auspicious"),
    ("Sadhya", "Achievable", "साध्य", "auspicious"),
    ("Shubha", "Auspicious", "शुभ", "auspicious"),
    ("Shukla", "Bright", "शुक्ल", "auspicious"),
    ("Brahma", "Creator", "ब्रह्म", "auspicious"),
    ("Indra", "King of gods", "इन्द्र", "auspicious"),
    ("Vaidhriti", "Holding back", "वैधृति", "inauspicious"),
]

# Seven movable karanas repeat through the month, four fixed ones occur once.
MOBILE_KARANAS = ["Bava", "Balava", "Kaulava", "Taitila", "Garaja", "Vanija", "Vishti"]
FIXED_KARANAS = ["Shakuni", "Chatushpada", "Naga", "Kimstughna"]

KARANA_MEANINGS = {
    "Bava": "Strength",
    "Balava": "Learning",
    "Kaulava": "Friendship",
    "Taitila": "Prosperity",
    "Garaja": "Agriculture",
    "Vanija": "Trade",
    "Vishti": "Obstacles (Bhadra)",
    "Shakuni": "Medicine",
    "Chatushpada": "Cattle",
    "Naga": "Harsh deeds",
    "Kimstughna": "Auspicious beginnings",
}

KARANA_SANSKRIT = {
    "Bava": "बव",
    "Balava": "बालव",
    "Kaulava": "कौलव",
    "Taitila": "तैतिल",
    "Garaja": "गर",
    "Vanija": "वणिज",
    "Vishti": "विष्टि",
    "Shakuni": "शकुनि",
    "Chatushpada": "चतुष्पद",
    "Naga": "नाग",
    "Kimstughna": "किंस्तुघ्न",
}

RASHIS: List[Tuple[str, str, str]] = [
    ("Mesha", "Mars", "Fire"),
    ("Vrishabha", "Venus", "Earth"),
    ("Mithuna", "Mercury", "Air"),
    ("Karka", "Moon", "Water"),
    ("Simha", "Sun", "Fire"),
    ("Kanya", "Mercury", "Earth"),
    ("Tula", "Venus", "Air"),
    ("Vrishchika", "Mars", "Water"),
    ("Dhanu", "Jupiter", "Fire"),
    ("Makara", "Saturn", "Earth"),
    ("Kumbha", "Saturn", "Air"),
    ("Meena", "Jupiter", "Water"),
]

MASA_NAMES = [
    "Chaitra",
    "Vaishakha",
    "Jyeshtha",
    "Ashadha",
    "Shravana",
    "Bhadrapada",
    "Ashwin",
    "Kartik",
    "Margashirsha",
    "Pausha",
    "Magha",
    "Phalguna",
]

MOON_PHASES = [
    "New Moon",
    "Waxing Crescent",
    "First Quarter",
    "Waxing Gibbous",
    "Full Moon",
    "Waning Gibbous",
    "Third Quarter",
    "Waning Crescent",
]

WEEKDAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]

SHUKLA = "Shukla"
KRISHNA = "Krishna"


def _key(name: str) -> str:
    base = re.sub(r"\(.*?\)", "", name or "")
    return re.sub(r"[^a-z]", "", base.lower())


@dataclass
class Table:
    """An ordered enumeration with per-name attributes."""

    kind: str
    names: List[str]
    attributes: Dict[str, Dict[str, str]]
    fields: Tuple[str, ...]
    aliases: Dict[str, str] = field(default_factory=dict)
    prefixes: Tuple[str, ...] = ()
    successors: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self._by_key: Dict[str, str] = {_key(n): n for n in self.attributes}
        for alias, canonical in self.aliases.items():
            self._by_key[_key(alias)] = canonical

    def __len__(self) -> int:
        return len(self.names)

    def name_for(self, index: int) -> str:
        return self.names[int(index) % len(self.names)]

    def canonical(self, name: Optional[str]) -> Optional[str]:
        """Resolve spelling variants to the canonical table name."""

        if not name:
            return None
        key = _key(name)
        if key in self._by_key:
            return self._by_key[key]
        for prefix in self.prefixes:
            if key.startswith(prefix) and key[len(prefix):] in self._by_key:
                return self._by_key[key[len(prefix):]]
        return None

    def successor(self, name: Optional[str]) -> Optional[str]:
        canonical = self.canonical(name)
        if canonical is None or canonical not in self.names:
            return None
        return self.successors.get(canonical) or self.name_for(self.names.index(canonical) + 1)

    def metadata_for(self, name: Optional[str]) -> Dict[str, str]:
        canonical = self.canonical(name)
        if canonical is None:
            return {f: UNKNOWN for f in self.fields}
        attrs = self.attributes[canonical]
        return {f: attrs.get(f, UNKNOWN) for f in self.fields}


TITHI = Table(
    kind="tithi",
    names=list(TITHI_NAMES),
    attributes={
        **{
            name: {"deity": deity, "sanskrit": sanskrit}
            for name, deity, sanskrit in zip(TITHI_NAMES, TITHI_DEITIES, TITHI_SANSKRIT)
        },
        AMAVASYA: {"deity": "Pitrs", "sanskrit": "अमावस्या"},
    },
    fields=("deity", "sanskrit"),
    aliases={
        "Prathama": "Pratipada",
        "Pratipat": "Pratipada",
        "Padyami": "Pratipada",
        "Dvitiya": "Dwitiya",
        "Vidiya": "Dwitiya",
        "Trutiya": "Tritiya",
        "Chauth": "Chaturthi",
        "Shashti": "Shashthi",
        "Shasthi": "Shashthi",
        "Sashti": "Shashthi",
        "Dasami": "Dashami",
        "Ekadasi": "Ekadashi",
        "Dvadashi": "Dwadashi",
        "Dwadasi": "Dwadashi",
        "Trayodasi": "Trayodashi",
        "Chaturdasi": "Chaturdashi",
        "Poornima": "Purnima",
        "Pournami": "Purnima",
        "Purnimasya": "Purnima",
        "Amavasai": "Amavasya",
        "Amavasi": "Amavasya",
    },
    prefixes=("shuklapaksha", "krishnapaksha", "shukla", "krishna"),
)

NAKSHATRA = Table(
    kind="nakshatra",
    names=[n[0] for n in NAKSHATRAS],
    attributes={
        n: {"lord": lord, "deity": deity, "rashi": rashi, "sanskrit": sanskrit}
        for n, lord, deity, rashi, sanskrit in NAKSHATRAS
    },
    fields=("lord", "deity", "rashi", "sanskrit"),
    aliases={
        "Aswini": "Ashwini",
        "Kritika": "Krittika",
        "Mrigashirsha": "Mrigashira",
        "Mrigasira": "Mrigashira",
        "Arudra": "Ardra",
        "Pushyami": "Pushya",
        "Aslesha": "Ashlesha",
        "Svati": "Swati",
        "Visakha": "Vishakha",
        "Jyestha": "Jyeshtha",
        "Moola": "Mula",
        "Purvashada": "Purva Ashadha",
        "Uttarashada": "Uttara Ashadha",
        "Sravana": "Shravana",
        "Dhanishtha": "Dhanishta",
        "Shatabhishak": "Shatabhisha",
        "Satabhisha": "Shatabhisha",
        "Purvabhadra": "Purva Bhadrapada",
        "Uttarabhadra": "Uttara Bhadrapada",
    },
)

YOGA = Table(
    kind="yoga",
    names=[y[0] for y in YOGAS],
    attributes={
        name: {"meaning": meaning, "sanskrit": sanskrit, "nature": nature}
        for name, meaning, sanskrit, nature in YOGAS
    },
    fields=("meaning", "sanskrit", "nature"),
    aliases={
        "Vishkambha": "Vishkumbha",
        "Priti": "Preeti",
        "Ayushmana": "Ayushman",
        "Shoola": "Shula",
        "Soola": "Shula",
        "Variyan": "Variyana",
        "Vyatipat": "Vyatipata",
        "Sukarman": "Sukarma",
    },
)

KARANA = Table(
    kind="karana",
    names=MOBILE_KARANAS + FIXED_KARANAS,
    attributes={
        name: {"meaning": KARANA_MEANINGS[name], "kind": kind, "sanskrit": KARANA_SANSKRIT[name]}
        for names, kind in ((MOBILE_KARANAS, "movable"), (FIXED_KARANAS, "fixed"))
        for name in names
    },
    fields=("meaning", "kind", "sanskrit"),
    aliases={
        "Gara": "Garaja",
        "Vanij": "Vanija",
        "Bhadra": "Vishti",
        "Taitula": "Taitila",
        "Chatushpad": "Chatushpada",
        "Kinstughna": "Kimstughna",
        "Kintughna": "Kimstughna",
    },
    # Vishti hands over to Shakuni only once per lunar month
    successors={"Vishti": "Bava"},
)

RASHI = Table(
    kind="rashi",
    names=[r[0] for r in RASHIS],
    attributes={name: {"lord": lord, "element": element} for name, lord, element in RASHIS},
    fields=("lord", "element"),
    aliases={
        "Mesh": "Mesha",
        "Vrishabh": "Vrishabha",
        "Vrischika": "Vrishchika",
        "Karkata": "Karka",
        "Kark": "Karka",
        "Makar": "Makara",
        "Kumbh": "Kumbha",
        "Meen": "Meena",
        "Dhanus": "Dhanu",
    },
)

TABLES: Dict[str, Table] = {t.kind: t for t in (TITHI, NAKSHATRA, YOGA, KARANA, RASHI)}


def name_for(kind: str, index: int) -> str:
    return TABLES[kind].name_for(index)


def metadata_for(kind: str, name: Optional[str]) -> Dict[str, str]:
    return TABLES[kind].metadata_for(name)


def tithi_name(index: int, paksha: str) -> str:
    """Name of tithi ``index`` (0-14) within a paksha; the dark 15th is Amavasya."""

    index = int(index) % len(TITHI_NAMES)
    if paksha == KRISHNA and index == len(TITHI_NAMES) - 1:
        return AMAVASYA
    return TITHI_NAMES[index]


def paksha_from_name(name: Optional[str]) -> Optional[str]:
    """Return the paksha a tithi label implies, if any."""

    key = _key(name or "")
    if key.startswith("krishna") or key.startswith("vadi") or TITHI.canonical(name) == AMAVASYA:
        return KRISHNA
    if key.startswith("shukla") or key.startswith("sudi") or TITHI.canonical(name) == "Purnima":
        return SHUKLA
    return None


def normalize_paksha(value: Optional[str]) -> Optional[str]:
    key = _key(value or "")
    if key.startswith("krishna") or key.startswith("vadi"):
        return KRISHNA
    if key.startswith("shukla") or key.startswith("sudi"):
        return SHUKLA
    return None


def lunar_day(tithi: Optional[str], paksha: Optional[str]) -> Optional[int]:
    """Position 1-30 in the lunar month for a tithi name and paksha."""

    canonical = TITHI.canonical(tithi)
    if canonical is None:
        return None
    if canonical == AMAVASYA:
        return 30
    index = TITHI_NAMES.index(canonical)
    return index + 1 + (15 if paksha == KRISHNA and canonical != "Purnima" else 0)


def karana_for_half_index(half: int) -> str:
    """Karana occupying half-tithi ``half`` (0-59) of the lunar month."""

    half = int(half) % 60
    if half == 0:
        return "Kimstughna"
    if half >= 57:
        return FIXED_KARANAS[half - 57]
    return MOBILE_KARANAS[(half - 1) % len(MOBILE_KARANAS)]


def moon_phase_for_lunar_day(day: int) -> str:
    return MOON_PHASES[int(day / 30 * len(MOON_PHASES)) % len(MOON_PHASES)]


def illumination_for_lunar_day(day: int) -> int:
    return int(round((1 - math.cos(2 * math.pi * day / 30)) / 2 * 100))
