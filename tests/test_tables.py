from panchang_api.services import tables
from panchang_api.services.tables import (
    KARANA,
    KRISHNA,
    NAKSHATRA,
    SHUKLA,
    TITHI,
    UNKNOWN,
    YOGA,
    karana_for_half_index,
    lunar_day,
    metadata_for,
    name_for,
    paksha_from_name,
    tithi_name,
)


def test_every_nakshatra_has_lord_and_deity():
    assert len(NAKSHATRA) == 27
    for name in NAKSHATRA.names:
        meta = NAKSHATRA.metadata_for(name)
        assert meta["lord"] != UNKNOWN
        assert meta["deity"] != UNKNOWN


def test_unknown_names_give_unknown_metadata():
    assert set(metadata_for("nakshatra", "Nonesuch").values()) == {UNKNOWN}
    assert metadata_for("yoga", None) == {"meaning": UNKNOWN, "sanskrit": UNKNOWN, "nature": UNKNOWN}
    assert metadata_for("karana", "") == {"meaning": UNKNOWN, "kind": UNKNOWN, "sanskrit": UNKNOWN}


def test_name_for_wraps_cycles():
    assert name_for("nakshatra", 27) == "Ashwini"
    assert name_for("yoga", 26) == "Vaidhriti"
    assert name_for("yoga", -1) == "Vaidhriti"


def test_spelling_variants_resolve():
    assert NAKSHATRA.canonical("Moola") == "Mula"
    assert NAKSHATRA.metadata_for("Purvashada")["lord"] == "Venus"
    assert YOGA.canonical("Sukarman") == "Sukarma"
    assert KARANA.metadata_for("Vishti (Bhadra)")["kind"] == "movable"
    assert TITHI.canonical("Krishna Paksha Ekadasi") == "Ekadashi"


def test_tithi_names_and_lunar_day():
    assert tithi_name(10, SHUKLA) == "Ekadashi"
    assert tithi_name(14, SHUKLA) == "Purnima"
    assert tithi_name(14, KRISHNA) == tables.AMAVASYA
    assert lunar_day("Ekadashi", KRISHNA) == 26
    assert lunar_day("Purnima", KRISHNA) == 15
    assert lunar_day("Amavasya", SHUKLA) == 30
    assert lunar_day("Nonesuch", SHUKLA) is None


def test_paksha_from_name():
    assert paksha_from_name("Shukla Dwitiya") == SHUKLA
    assert paksha_from_name("Krishna Paksha Navami") == KRISHNA
    assert paksha_from_name("Amavasya") == KRISHNA
    assert paksha_from_name("Navami") is None


def test_karana_sequence_over_the_month():
    assert karana_for_half_index(0) == "Kimstughna"
    assert karana_for_half_index(1) == "Bava"
    assert karana_for_half_index(7) == "Vishti"
    assert karana_for_half_index(8) == "Bava"
    assert [karana_for_half_index(h) for h in (57, 58, 59)] == ["Shakuni", "Chatushpada", "Naga"]


def test_successor_follows_the_cycle():
    assert NAKSHATRA.successor("Revati") == "Ashwini"
    assert YOGA.successor("Sukarma") == "Dhriti"
    assert KARANA.successor("Vishti") == "Bava"
    assert KARANA.successor("Kimstughna") == "Bava"
    assert KARANA.successor("Nonesuch") is None


def test_devanagari_names_and_yoga_nature():
    assert TITHI.metadata_for("Krishna Amavasya")["sanskrit"] == "अमावस्या"
    assert NAKSHATRA.metadata_for("Revati")["sanskrit"] == "रेवती"
    assert KARANA.metadata_for("Bhadra")["sanskrit"] == "विष्टि"
    assert YOGA.metadata_for("Vyatipat") == {"meaning": "Calamity", "sanskrit": "व्यतीपात", "nature": "inauspicious"}
    assert YOGA.metadata_for("Siddhi")["nature"] == "auspicious"
