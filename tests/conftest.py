import os
import sys

import pytest

# Ensure src is on path for test imports
ROOT = os.path.dirname(os.path.dirname(__file__))
SRC = os.path.join(ROOT, "src")
if SRC not in sys.path:
    sys.path.insert(0, SRC)

from falling_blocks.game import GameConfig, GameSession, ManualScheduler  # noqa: E402


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def session(scheduler):
    return GameSession(GameConfig(random_seed=7), scheduler=scheduler)


@pytest.fixture
def recorder(session):
    """Collect (signal name, payload) pairs emitted by ``session``."""
    events = []

    def _listen(name):
        def _fn(sender, **payload):
            events.append((name, payload))
        return _fn

    for name in ("move", "rotate", "line_clear", "game_over", "locked"):
        session.signals.subscribe(name, _listen(name))
    return events
