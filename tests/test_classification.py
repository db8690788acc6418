import pytest

from app.core.classification import classify_low_score_categories, low_score_threshold
from app.core.config import settings
from app.core.enums import ClassificationOutcome


def test_low_categories_keep_input_order():
    means = {"Leadership": 2.5, "Communication": 3.5, "Teamwork": 2.9}
    result = classify_low_score_categories(means, 3.0)
    assert result.outcome == ClassificationOutcome.DEVELOPMENT_AREAS
    assert result.categories == ["Leadership", "Teamwork"]


def test_threshold_is_strict():
    result = classify_low_score_categories({"Leadership": 3.0}, 3.0)
    assert result.categories == []


def test_nothing_below_threshold_is_a_distinct_outcome():
    result = classify_low_score_categories({"Leadership": 4.2, "Teamwork": 3.1})
    assert result.outcome == ClassificationOutcome.NO_DEVELOPMENT_AREAS
    assert result.no_development_areas
    assert result.categories == []


def test_no_data_is_no_development_areas():
    assert classify_low_score_categories({}).no_development_areas


@pytest.mark.parametrize(
    "scale_min,scale_max,ratio,expected",
    [(1, 5, 0.5, 3.0), (1, 10, 0.5, 5.5), (0, 100, 0.7, 70.0)],
)
def test_threshold_from_scale(scale_min, scale_max, ratio, expected):
    assert low_score_threshold(scale_min, scale_max, ratio) == pytest.approx(expected)


def test_threshold_rejects_bad_scale():
    with pytest.raises(ValueError):
        low_score_threshold(5, 1)
    with pytest.raises(ValueError):
        low_score_threshold(1, 5, 1.5)


def test_default_threshold_follows_configured_scale(monkeypatch):
    means = {"Leadership": 5.0, "Teamwork": 6.0}
    assert classify_low_score_categories(means).categories == []

    monkeypatch.setattr(settings, "RATING_SCALE_MAX", 10)
    result = classify_low_score_categories(means)
    assert result.threshold == pytest.approx(5.5)
    assert result.categories == ["Leadership"]
