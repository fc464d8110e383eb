import pytest


@pytest.fixture(autouse=True)
def log_dir(tmp_path, monkeypatch):
    """Keep every test's debug, event and error logs out of the app's data dir."""
    path = tmp_path / 'logs'
    monkeypatch.setenv('TRACKER_LOG_DIR', str(path))
    for name in ('STREAK_THRESHOLD', 'TREND_MIN_REPORTS', 'WEIGHT_TOLERANCE', 'TRACKER_LOG_LEVEL'):
        monkeypatch.delenv(name, raising=False)
    return path
