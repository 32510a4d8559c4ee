"""Shared fixtures.

The application modules import each other as top-level packages
(`detection`, `utils`, ...), the same way main.py runs them.
"""

import sys
from pathlib import Path

import pytest

project_root = Path(__file__).parent.parent / 'susfactor'
sys.path.insert(0, str(project_root))

from utils.config import Config  # noqa: E402
from database.connection import set_db_path  # noqa: E402


def build_config(tmp_path, **overrides):
    data = {
        'detection': {
            'headshot_ratio_threshold':         3.0,
            'smooth_aim_threshold':             2.5,
            'suspicion_decay_rate':             0.5,
            'notification_threshold':           10.0,
            'notification_cooldown_minutes':    10,
            'min_hits_for_evaluation':          30,
            'min_hits_for_baseline':            50,
            'baseline_update_interval_minutes': 60,
            'min_distance_for_checks':          2.0,
            'exclude_friendly_fire':            True,
        },
        'actions': {
            'log_to_console': True,
            'notify_admins':  True,
            'on_detection':   'none',
            'webhook_url':    '',
        },
        'storage':     {'data_path': str(tmp_path / 'data' / 'susfactor.json')},
        'database':    {'path': str(tmp_path / 'data' / 'database' / 'susfactor.db')},
        'performance': {'queue_size': 1000, 'worker_threads': 1},
    }
    config = Config(data=data)
    for key, value in overrides.items():
        config.set(key.replace('__', '.'), value)
    return config


@pytest.fixture
def config(tmp_path):
    return build_config(tmp_path)


@pytest.fixture
def make_config(tmp_path):
    def _make(**overrides):
        return build_config(tmp_path, **overrides)
    return _make


class FakeClock:
    def __init__(self, now=1_700_000_000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture(autouse=True)
def no_database():
    """Detection history stays off unless a test initializes it."""
    set_db_path(None)
    yield
    set_db_path(None)
