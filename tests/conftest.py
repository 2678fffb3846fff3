"""
Global test fixtures for fuzzysig.

This module contains test fixtures that can be used across all test modules.
"""

from datetime import datetime, timedelta
from pathlib import Path

import numpy as np
import pytest

from fuzzysig.config import load_engine_config
from fuzzysig.data import Bar

PROJECT_ROOT = Path(__file__).resolve().parent.parent
DEFAULT_CONFIG_PATH = PROJECT_ROOT / "config" / "signal_engine.yaml"

START = datetime(2024, 1, 1)
HOUR = timedelta(hours=1)


def build_bars(closes, start=START, interval=HOUR, spread=0.5, highs=None, lows=None):
    """
    Build bars around a sequence of closes.

    Opens are the previous close; highs and lows default to the larger/smaller
    of open and close widened by ``spread``.
    """
    closes = [float(c) for c in closes]
    opens = [closes[0]] + closes[:-1]
    if highs is None:
        highs = [max(o, c) + spread for o, c in zip(opens, closes)]
    if lows is None:
        lows = [min(o, c) - spread for o, c in zip(opens, closes)]
    return [
        Bar(
            timestamp=start + i * interval,
            open=opens[i],
            high=float(highs[i]),
            low=float(lows[i]),
            close=closes[i],
            volume=1000.0 + i,
        )
        for i in range(len(closes))
    ]


def random_walk_closes(length, seed=42, base_price=100.0):
    """Reproducible random walk with a 1% step standard deviation."""
    rng = np.random.default_rng(seed)
    changes = rng.normal(0, 0.01, length)
    return base_price * np.cumprod(1 + changes)


@pytest.fixture
def bar_factory():
    """Factory building bars from closes, see ``build_bars``."""
    return build_bars


@pytest.fixture
def sample_bars():
    """
    Generate 300 hourly bars of synthetic random-walk prices.

    Returns:
        list[Bar]: Strictly ordered bars starting 2024-01-01 00:00.
    """
    return build_bars(random_walk_closes(300))


@pytest.fixture
def rising_bars():
    """120 hourly bars with strictly increasing closes."""
    return build_bars(np.linspace(100.0, 160.0, 120))


@pytest.fixture
def falling_bars():
    """120 hourly bars with strictly decreasing closes."""
    return build_bars(np.linspace(160.0, 100.0, 120))


@pytest.fixture
def default_config_path():
    """Path to the configuration shipped with the project."""
    return DEFAULT_CONFIG_PATH


@pytest.fixture
def default_config():
    """The shipped configuration, loaded and validated."""
    return load_engine_config(DEFAULT_CONFIG_PATH)


@pytest.fixture
def minimal_config_dict():
    """
    Small configuration with one RSI indicator and two rules.

    Returns a fresh dict so tests can modify it.
    """
    return {
        "indicators": [{"id": "rsi_5", "type": "rsi", "params": {"period": 5}}],
        "fuzzy_sets": {
            "rsi_5": {
                "low": {"type": "trapezoidal", "parameters": [float("-inf"), float("-inf"), 30, 50]},
                "high": {"type": "trapezoidal", "parameters": [50, 70, float("inf"), float("inf")]},
            }
        },
        "output": {
            "range": [-1.0, 1.0],
            "terms": {"sell": {"value": -1.0}, "buy": {"value": 1.0}},
        },
        "rules": [
            {"id": "buy_low", "when": {"rsi_5": "low"}, "then": "buy"},
            {"id": "sell_high", "when": {"rsi_5": "high"}, "then": "sell"},
        ],
    }


@pytest.fixture
def walk_factory():
    """Factory for reproducible random-walk closes, see ``random_walk_closes``."""
    return random_walk_closes
