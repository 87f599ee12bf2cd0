import pytest
import config


@pytest.mark.parametrize("raw,expected", [
    (None, 5),
    ("3", 3),
    ("0", 5),
    ("many", 5),
])
def test_history_limit_from_env(monkeypatch, raw, expected):
    if raw is None:
        monkeypatch.delenv("TASKMAN_HISTORY_LIMIT", raising=False)
    else:
        monkeypatch.setenv("TASKMAN_HISTORY_LIMIT", raw)
    assert config.get_history_limit() == expected


def test_session_uses_configured_limit(data_dir, monkeypatch):
    from session import Session
    monkeypatch.setenv("TASKMAN_HISTORY_LIMIT", "2")

    assert Session.open("alice").history.limit == 2


if __name__ == "__main__":
    pytest.main([__file__])
