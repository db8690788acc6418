from app.core.aggregation import build_scorecard
from app.core.config import settings
from app.core.report import NOT_AVAILABLE, format_score, project_report, rating_scale_labels, score_band
from app.schemas.scorecard import Scorecard
from tests.helpers import snap


def _rows(projection):
    return {row.label: row for row in projection.cycles[0].rows}


def test_missing_bucket_renders_not_available():
    report = project_report(build_scorecard("u1", [snap("m", "manager", [3])]))
    rows = _rows(report)
    assert rows["Peer"].average is None
    assert rows["Peer"].average_display == NOT_AVAILABLE
    assert rows["Peer"].count == 0
    assert rows["Peer"].band == "none"


def test_zero_average_is_not_not_available():
    report = project_report(build_scorecard("u1", [snap("p", "peer", [0])]))
    peer = _rows(report)["Peer"]
    assert peer.average == 0.0
    assert peer.average_display == "0.00"
    assert peer.band == "critical"


def test_rows_in_relationship_order_with_overall_last():
    report = project_report(build_scorecard("u1", [snap("s", "self", [4]), snap("p", "peer", [2])]))
    labels = [r.label for r in report.cycles[0].rows]
    assert labels == ["Self", "Manager", "Peer", "Direct Report", "OVERALL"]
    overall = report.cycles[0].rows[-1]
    assert overall.count == 2
    assert overall.average_display == "3.00"
    assert overall.min_display == "2.00"
    assert overall.max_display == "4.00"


def test_summary_without_data():
    report = project_report(Scorecard(subject_user_id="u1", cycles=[], category_means={}))
    assert report.cycles == []
    assert report.summary.overall_average is None
    assert report.summary.overall_display == NOT_AVAILABLE
    assert len(report.summary.rating_scale) == 5


def test_summary_is_mean_of_cycle_averages():
    card = build_scorecard("u1", [
        snap("a", "peer", [4], cycle_id="c1"),
        snap("b", "peer", [2], cycle_id="c2"),
        snap("c", "peer", [2], cycle_id="c2"),
    ])
    assert project_report(card).summary.overall_average == 3.0


def test_format_and_band():
    assert format_score(None) == "N/A"
    assert format_score(3.456) == "3.46"
    assert score_band(1.9) == "critical"
    assert score_band(2.0) == "warning"
    assert score_band(3.99) == "neutral"
    assert score_band(4.0) == "strong"
    assert score_band(None) == "none"


def test_rating_scale_labels_default_to_one_to_five():
    assert rating_scale_labels() == [
        "1: Needs significant improvement",
        "2: Needs some improvement",
        "3: Meets expectations",
        "4: Exceeds expectations",
        "5: Outstanding performance",
    ]


def test_bands_and_labels_follow_wider_scale():
    assert score_band(3.0, 1, 10) == "critical"
    assert score_band(4.0, 1, 10) == "warning"
    assert score_band(7.0, 1, 10) == "neutral"
    assert score_band(8.0, 1, 10) == "strong"

    report = project_report(build_scorecard("u1", [snap("p", "peer", [4])]), scale_min=1, scale_max=10)
    assert _rows(report)["Peer"].band == "warning"
    assert report.summary.rating_scale[0] == "1: Needs significant improvement"
    assert report.summary.rating_scale[-1] == "10: Outstanding performance"


def test_report_uses_configured_scale(monkeypatch):
    monkeypatch.setattr(settings, "RATING_SCALE_MAX", 10)
    report = project_report(build_scorecard("u1", [snap("p", "peer", [4])]))
    assert _rows(report)["Peer"].band == "warning"
    assert report.summary.rating_scale[-1] == "10: Outstanding performance"
