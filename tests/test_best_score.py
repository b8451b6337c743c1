import json
from pathlib import Path

from sodamerge.utils.best_score import BEST_SCORE_ENV, BEST_SCORE_KEY, BestScoreStore


def test_missing_file_loads_zero(tmp_path) -> None:
    store = BestScoreStore(Path(tmp_path) / "nested" / "best.json")
    assert store.load() == 0
    assert not store.path.exists()


def test_record_only_persists_improvements(tmp_path) -> None:
    path = Path(tmp_path) / "best.json"
    store = BestScoreStore(path)
    store.load()

    assert store.record(120) is True
    assert store.record(80) is False
    assert store.record(120) is False

    with path.open("r", encoding="utf-8") as handle:
        payload = json.load(handle)
    assert payload == {BEST_SCORE_KEY: 120}


def test_corrupt_file_recovers(tmp_path) -> None:
    path = Path(tmp_path) / "best.json"
    path.write_text("{not json", encoding="utf-8")
    store = BestScoreStore(path)
    assert store.load() == 0
    assert store.record(10) is True
    assert BestScoreStore(path).load() == 10


def test_unexpected_payload_shape_loads_zero(tmp_path) -> None:
    path = Path(tmp_path) / "best.json"
    path.write_text(json.dumps([1, 2, 3]), encoding="utf-8")
    assert BestScoreStore(path).load() == 0


def test_default_path_honours_environment(tmp_path, monkeypatch) -> None:
    target = Path(tmp_path) / "saves" / "best.json"
    monkeypatch.setenv(BEST_SCORE_ENV, str(target))
    store = BestScoreStore()
    assert store.path == target
    store.load()
    store.record(42)
    assert json.loads(target.read_text(encoding="utf-8")) == {BEST_SCORE_KEY: 42}


def test_default_path_without_environment(monkeypatch) -> None:
    monkeypatch.delenv(BEST_SCORE_ENV, raising=False)
    store = BestScoreStore()
    assert store.path.name == "best_score.json"
    assert store.path.parent.name == "data"
