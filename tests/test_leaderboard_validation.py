import pytest

from sodamerge.leaderboard.validation import (
    ScoreSubmission,
    ValidationError,
    sanitize_username,
    to_int,
    validate_submission,
)


def test_username_whitespace_is_collapsed():
    assert sanitize_username("  fizzy   pop ") == "fizzy pop"


@pytest.mark.parametrize("value", ["ab", "x" * 17, "bad!name", 42, None, "   "])
def test_username_rejections(value):
    assert sanitize_username(value) is None


def test_to_int_floors_numbers_and_numeric_strings():
    assert to_int(12.9) == 12
    assert to_int("7.5") == 7
    assert to_int(" 30 ") == 30
    assert to_int(True) is None
    assert to_int("abc") is None
    assert to_int(float("inf")) is None
    assert to_int(None) is None


def test_valid_submission():
    submission = validate_submission({"username": "Root Beer", "score": "1024", "moves": 88.2, "maxTile": 9})
    assert submission == ScoreSubmission(username="Root Beer", score=1024, moves=88, max_tile=9)


def test_max_tile_is_optional():
    submission = validate_submission({"username": "cola", "score": 0, "moves": 0})
    assert submission.max_tile is None


@pytest.mark.parametrize(
    "payload, message",
    [
        ({"username": "no", "score": 1, "moves": 1}, "Invalid username (3-16 chars)."),
        ({"username": "cola", "score": -1, "moves": 1}, "Invalid score."),
        ({"username": "cola", "score": 10_000_001, "moves": 1}, "Invalid score."),
        ({"username": "cola", "score": 5, "moves": "many"}, "Invalid move count."),
        ({"username": "cola", "score": 5, "moves": 100_001}, "Invalid move count."),
        ({"username": "cola", "score": 5, "moves": 1, "maxTile": 21}, "Invalid maxTile."),
        ({"username": "cola", "score": 5, "moves": 1, "maxTile": None}, "Invalid maxTile."),
        (["not", "a", "dict"], "Invalid username (3-16 chars)."),
    ],
)
def test_rejections_carry_user_facing_message(payload, message):
    with pytest.raises(ValidationError) as excinfo:
        validate_submission(payload)
    assert str(excinfo.value) == message
