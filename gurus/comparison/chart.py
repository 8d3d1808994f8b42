"""Radar-chart data: a static default table and the sanitizer for LLM output.

The chart prompt only asks the model for JSON; nothing enforces the shape, so
every field is validated and repaired here. Whatever comes in, the result has
one label per worldview and one score per label in every dataset.
"""

import logging
import math
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from gurus.comparison.models import ChartData, ChartDataset, ChartPayload
from gurus.worldviews import Worldview, capitalize, display_names

logger = logging.getLogger(__name__)

CHART_COLORS = {
    "backgroundColor": [
        "rgba(200, 190, 240, 0.5)",
        "rgba(255, 205, 130, 0.5)",
        "rgba(120, 220, 170, 0.5)",
        "rgba(240, 150, 150, 0.5)",
    ],
    "borderColor": [
        "rgba(170, 150, 220, 1)",
        "rgba(235, 175, 90, 1)",
        "rgba(80, 190, 140, 1)",
        "rgba(220, 110, 110, 1)",
    ],
}

METRIC_COUNT = 4
NEUTRAL_SCORE = 50

DEFAULT_METRICS = [
    "Monotheism",
    "Sacred Texts Authority",
    "Afterlife Beliefs",
    "Moral Absolutes",
]

# Typical theological positions, not derived from any model output
DEFAULT_SCORES: Dict[str, Dict[Worldview, int]] = {
    "Monotheism": {
        Worldview.ATHEISM: 15,       # rejects deity concepts
        Worldview.AGNOSTICISM: 30,   # uncertain about deities
        Worldview.CHRISTIANITY: 95,
        Worldview.ISLAM: 98,         # strict monotheism
        Worldview.HINDUISM: 70,      # one reality, many manifestations
        Worldview.BUDDHISM: 40,      # generally non-theistic
        Worldview.JUDAISM: 95,
        Worldview.SIKHISM: 90,
    },
    "Sacred Texts Authority": {
        Worldview.ATHEISM: 10,
        Worldview.AGNOSTICISM: 25,
        Worldview.CHRISTIANITY: 90,  # Bible
        Worldview.ISLAM: 95,         # Quran as direct revelation
        Worldview.HINDUISM: 85,      # Vedas, Upanishads, Gita
        Worldview.BUDDHISM: 80,      # sutras
        Worldview.JUDAISM: 95,       # Torah and Talmud
        Worldview.SIKHISM: 90,       # Guru Granth Sahib
    },
    "Afterlife Beliefs": {
        Worldview.ATHEISM: 10,
        Worldview.AGNOSTICISM: 40,
        Worldview.CHRISTIANITY: 95,  # heaven/hell
        Worldview.ISLAM: 95,         # paradise/hell
        Worldview.HINDUISM: 90,      # reincarnation/moksha
        Worldview.BUDDHISM: 90,      # rebirth/nirvana
        Worldview.JUDAISM: 85,       # olam ha-ba, views vary
        Worldview.SIKHISM: 85,       # rebirth until union with God
    },
    "Moral Absolutes": {
        Worldview.ATHEISM: 60,
        Worldview.AGNOSTICISM: 50,
        Worldview.CHRISTIANITY: 90,
        Worldview.ISLAM: 95,
        Worldview.HINDUISM: 85,      # dharma
        Worldview.BUDDHISM: 80,      # precepts
        Worldview.JUDAISM: 90,
        Worldview.SIKHISM: 85,
    },
}


def _dataset(label: str, data: List[int], index: int) -> ChartDataset:
    palette_bg = CHART_COLORS["backgroundColor"]
    palette_border = CHART_COLORS["borderColor"]
    return ChartDataset(
        label=label,
        data=data,
        backgroundColor=palette_bg[index % len(palette_bg)],
        borderColor=palette_border[index % len(palette_border)],
        borderWidth=1,
    )


def default_chart_data() -> ChartData:
    """The static chart used whenever the model's chart JSON is unusable."""
    datasets = [
        _dataset(metric, [DEFAULT_SCORES[metric][wv] for wv in Worldview], index)
        for index, metric in enumerate(DEFAULT_METRICS)
    ]
    return ChartData(labels=display_names(), datasets=datasets)


def default_score(metric: str, worldview: Worldview) -> int:
    """Table value for (metric, worldview), matching the metric case-insensitively."""
    wanted = metric.strip().lower()
    for name, column in DEFAULT_SCORES.items():
        if name.lower() == wanted:
            return column.get(worldview, NEUTRAL_SCORE)
    return NEUTRAL_SCORE


def clamp_score(value: Any) -> int:
    """Coerce to an integer in [0, 100]; anything non-numeric becomes 50."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return NEUTRAL_SCORE
    # JSON ints are unbounded and may not fit in a float
    if isinstance(value, int):
        return max(0, min(100, value))
    if math.isnan(value):
        return NEUTRAL_SCORE
    if math.isinf(value):
        return 100 if value > 0 else 0
    # half-up, not banker's rounding
    return max(0, min(100, int(math.floor(value + 0.5))))


def _raw_score(scores: Dict[str, Any], key: str, index: int) -> Optional[Any]:
    row = scores.get(key)
    if not isinstance(row, list) or index >= len(row):
        return None
    return row[index]


def _metric_name(metric: Any) -> str:
    if isinstance(metric, str) and metric.strip():
        return metric.strip()
    return str(metric)


def sanitize_chart_data(chart_json: Any) -> ChartData:
    """Turn whatever the model returned into a well-formed ChartData.

    - ``metrics`` must be a non-empty list and ``scores`` a mapping, otherwise
      the default chart is returned.
    - At most 4 metrics are kept; fewer are padded with the default metric
      names at the missing positions.
    - A score is looked up under the lowercase worldview key, then the
      capitalized key, then the default table, then 50.
    """
    try:
        payload = ChartPayload.model_validate(chart_json)
    except ValidationError as e:
        logger.info("Invalid chart data structure, using default data: %s", e.error_count())
        return default_chart_data()

    metrics = [_metric_name(m) for m in payload.metrics[:METRIC_COUNT]]
    while len(metrics) < METRIC_COUNT:
        metrics.append(DEFAULT_METRICS[len(metrics)])

    datasets = []
    for index, metric in enumerate(metrics):
        data = []
        for worldview in Worldview:
            raw = _raw_score(payload.scores, worldview.value, index)
            if raw is None:
                raw = _raw_score(payload.scores, capitalize(worldview.value), index)
            if raw is None:
                data.append(default_score(metric, worldview))
            else:
                data.append(clamp_score(raw))
        datasets.append(_dataset(metric, data, index))

    return ChartData(labels=display_names(), datasets=datasets)
