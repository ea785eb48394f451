from panchang_api.services.dosha import build_intervals, severity_for, triples_from_spans, triples_from_windows


def test_severity_is_a_function_of_tags():
    assert severity_for(["Rahu"]) == "avoid"
    assert severity_for(["N Visha", "T Randhra"]) == "avoid"
    assert severity_for(["Gulika"]) == "caution"
    assert severity_for(["Nakshatra"]) == "normal"
    assert severity_for([]) == "normal"


def test_overlapping_triples_are_partitioned():
    intervals = build_intervals([(324, 400, ["Rahu"]), (380, 450, ["N Visha"])])
    spans = [(i["start_minutes"], i["end_minutes"], i["tags"]) for i in intervals]
    assert spans == [
        (0, 324, []),
        (324, 380, ["Rahu"]),
        (380, 400, ["N Visha", "Rahu"]),
        (400, 450, ["N Visha"]),
        (450, 1440, []),
    ]
    assert [i["severity"] for i in intervals] == ["normal", "avoid", "avoid", "caution", "normal"]
    assert intervals[1]["start"] == "05:24"
    assert intervals[0]["description"] == "Normal period"


def test_adjacent_pieces_with_equal_tags_merge():
    intervals = build_intervals([(100, 200, ["Gulika"]), (200, 300, ["Gulika"])])
    assert [(i["start_minutes"], i["end_minutes"]) for i in intervals] == [(0, 100), (100, 300), (300, 1440)]


def test_no_triples_covers_the_whole_day():
    assert [(i["start_minutes"], i["end_minutes"], i["severity"]) for i in build_intervals([])] == [(0, 1440, "normal")]


def test_empty_and_inverted_triples_are_ignored():
    intervals = build_intervals([(500, 500, ["Rahu"]), (700, 600, ["Rahu"])])
    assert len(intervals) == 1


def test_windows_become_tagged_triples():
    triples = triples_from_windows({"rahu_kaal": (990, 1080), "abhijit_muhurat": (696, 744)})
    assert triples == [(990, 1080, ["Rahu"])]


def test_rendered_window_fields_become_triples():
    fields = {"rahu_kaal": "17:27 - 19:09", "gulika_kaal": "garbled", "dur_muhurat": "23:40 - 00:20", "sunrise": "05:24"}
    assert triples_from_spans(fields) == [(1047, 1149, ["Rahu"]), (1420, 1460, ["Dur Muhurta"])]
