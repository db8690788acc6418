from app.core.scoring import average_score
from app.schemas.evaluation_response import AnswerSnapshot


def test_average_ignores_text_answers():
    answers = [
        {"question_id": "q1", "rating_value": 4},
        {"question_id": "q2", "rating_value": 2},
        {"question_id": "q3", "text_value": "Great partner"},
    ]
    assert average_score(answers) == 3.0


def test_average_is_none_without_ratings():
    """No rating answers is 'no data', never 0"""
    assert average_score([]) is None
    assert average_score([{"question_id": "q1", "text_value": "Comments"}]) is None


def test_zero_rating_counts():
    assert average_score([{"rating_value": 0}, {"rating_value": 2}]) == 1.0


def test_average_accepts_snapshot_objects():
    answers = [
        AnswerSnapshot(question_id="q1", question_text="Leads", category="Leadership", rating_value=5),
        AnswerSnapshot(question_id="q2", question_text="Shares", category="Communication", rating_value=4),
    ]
    assert average_score(answers) == 4.5
