import json
import math

import pytest

from gurus.comparison.chart import (
    CHART_COLORS,
    DEFAULT_METRICS,
    DEFAULT_SCORES,
    clamp_score,
    default_chart_data,
    default_score,
    sanitize_chart_data,
)
from gurus.worldviews import Worldview

LABELS = [
    "Atheism", "Agnosticism", "Christianity", "Islam",
    "Hinduism", "Buddhism", "Judaism", "Sikhism",
]


def assert_well_formed(chart):
    assert chart.labels == LABELS
    assert chart.datasets
    for dataset in chart.datasets:
        assert len(dataset.data) == len(chart.labels)
        for score in dataset.data:
            assert isinstance(score, int)
            assert 0 <= score <= 100


@pytest.mark.parametrize("malformed", [
    None,
    "not json",
    [],
    {},
    {"metrics": ["A"]},
    {"scores": {"atheism": [1]}},
    {"metrics": [], "scores": {}},
    {"metrics": "Monotheism", "scores": {}},
    {"metrics": ["A"], "scores": ["atheism", 1]},
    {"metrics": ["A"], "scores": "nope"},
])
def test_malformed_input_returns_default_chart(malformed):
    chart = sanitize_chart_data(malformed)

    assert_well_formed(chart)
    assert chart == default_chart_data()
    assert [d.label for d in chart.datasets] == DEFAULT_METRICS


def test_default_chart_matches_static_table():
    chart = default_chart_data()

    christianity = LABELS.index("Christianity")
    assert chart.datasets[0].data[christianity] == 95
    assert chart.datasets[0].data[0] == DEFAULT_SCORES["Monotheism"][Worldview.ATHEISM]
    assert chart.datasets[3].data[LABELS.index("Sikhism")] == 85


def test_sanitizer_is_deterministic():
    malformed = {"metrics": [], "scores": None}
    first = sanitize_chart_data(malformed).model_dump_json()
    second = sanitize_chart_data(malformed).model_dump_json()
    assert first == second


def test_fewer_metrics_are_padded_with_defaults_in_order():
    chart = sanitize_chart_data({
        "metrics": ["Grace", "Karma"],
        "scores": {wv.value: [70, 30] for wv in Worldview},
    })

    assert [d.label for d in chart.datasets] == [
        "Grace", "Karma", "Afterlife Beliefs", "Moral Absolutes",
    ]
    assert chart.datasets[0].data == [70] * len(LABELS)
    # padded metrics have no model scores, so the table supplies them
    assert chart.datasets[2].data == [
        DEFAULT_SCORES["Afterlife Beliefs"][wv] for wv in Worldview
    ]


def test_extra_metrics_are_truncated_to_four():
    chart = sanitize_chart_data({
        "metrics": ["A", "B", "C", "D", "E", "F"],
        "scores": {wv.value: [1, 2, 3, 4, 5, 6] for wv in Worldview},
    })

    assert [d.label for d in chart.datasets] == ["A", "B", "C", "D"]
    assert chart.datasets[3].data == [4] * len(LABELS)


def test_capitalized_worldview_keys_are_accepted():
    chart = sanitize_chart_data({
        "metrics": ["A", "B", "C", "D"],
        "scores": {wv.display_name: [11, 22, 33, 44] for wv in Worldview},
    })

    assert chart.datasets[1].data == [22] * len(LABELS)


def test_missing_worldview_uses_table_then_neutral():
    scores = {wv.value: [5, 5, 5, 5] for wv in Worldview if wv is not Worldview.ISLAM}
    chart = sanitize_chart_data({
        "metrics": ["monotheism", "Unknown Concept", "C", "D"],
        "scores": scores,
    })

    islam = LABELS.index("Islam")
    # metric names match the table case-insensitively
    assert chart.datasets[0].data[islam] == DEFAULT_SCORES["Monotheism"][Worldview.ISLAM]
    assert chart.datasets[1].data[islam] == 50
    assert chart.datasets[0].data[0] == 5


def test_short_score_rows_fall_back_per_index():
    scores = {wv.value: [80] for wv in Worldview}
    chart = sanitize_chart_data({"metrics": ["X", "Moral Absolutes"], "scores": scores})

    assert chart.datasets[0].data == [80] * len(LABELS)
    assert chart.datasets[1].data == [
        DEFAULT_SCORES["Moral Absolutes"][wv] for wv in Worldview
    ]


@pytest.mark.parametrize("value,expected", [
    (150, 100),
    (-20, 0),
    (42.4, 42),
    (42.5, 43),
    (float("nan"), 50),
    (float("inf"), 100),
    (float("-inf"), 0),
    ("90", 50),
    (None, 50),
    (True, 50),
    ([1], 50),
])
def test_clamp_score(value, expected):
    assert clamp_score(value) == expected


def test_out_of_range_and_non_numeric_scores_are_repaired():
    chart = sanitize_chart_data({
        "metrics": ["A", "B", "C", "D"],
        "scores": {wv.value: [500, -3, "high", None] for wv in Worldview},
    })

    assert_well_formed(chart)
    assert chart.datasets[0].data[0] == 100
    assert chart.datasets[1].data[0] == 0
    assert chart.datasets[2].data[0] == 50
    # an explicit null counts as missing, not as a bad value
    assert chart.datasets[3].data[0] == 50


def test_palette_cycles_by_metric_index():
    chart = sanitize_chart_data({
        "metrics": ["A", "B", "C", "D"],
        "scores": {},
    })

    for index, dataset in enumerate(chart.datasets):
        assert dataset.backgroundColor == CHART_COLORS["backgroundColor"][index % 4]
        assert dataset.borderColor == CHART_COLORS["borderColor"][index % 4]
        assert dataset.borderWidth == 1


def test_default_score_unknown_metric_is_neutral():
    assert default_score("Something Else", Worldview.BUDDHISM) == 50
    assert default_score(" afterlife beliefs ", Worldview.BUDDHISM) == 90
    assert not math.isnan(default_score("", Worldview.ATHEISM))


def test_huge_integer_scores_are_clamped():
    chart = sanitize_chart_data(json.loads(
        '{"metrics": ["A"], "scores": {"atheism": [1' + "0" * 400 + '], "islam": [-1' + "0" * 400 + ']}}'
    ))

    assert_well_formed(chart)
    assert chart.datasets[0].data[0] == 100
    assert chart.datasets[0].data[LABELS.index("Islam")] == 0
