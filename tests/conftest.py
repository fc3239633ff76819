"""Shared fixtures: sample results, a scripted scan source, a manual scheduler."""

from __future__ import annotations

import os
import sys
from datetime import datetime, timezone

import pytest

# Ensure project root is on path
ROOT = os.path.dirname(os.path.dirname(__file__))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from microscopy.models.schemas import AnalysisResult  # noqa: E402

DOCK_DISTRIBUTION = [
    {"name": "Chaetoceros", "count": 30},
    {"name": "Thalassiosira", "count": 25},
    {"name": "Prorocentrum", "count": 15},
    {"name": "Dinophysis", "count": 5},
    {"name": "Other", "count": 5},
]


def make_payload(**overrides):
    payload = {
        "imageRef": "https://placehold.co/600x400?text=Feed+1",
        "totalOrganisms": 80,
        "uniqueSpeciesCount": 5,
        "highRiskAlerts": [
            {"name": "Dinophysis", "species": "Dinoflagellate", "count": 5, "riskLevel": "High"}
        ],
        "environmental": {
            "location": "13.0827° N, 80.2707° E",
            "temperature": "28.1°C",
            "timestampUTC": "2026-10-19T08:30:00Z",
        },
        "speciesDistribution": [dict(d) for d in DOCK_DISTRIBUTION],
    }
    payload.update(overrides)
    return payload


def make_result(**overrides) -> AnalysisResult:
    return AnalysisResult.from_payload(make_payload(**overrides))


class ScriptedSource:
    """Scan source that returns (or raises) queued items in order."""

    def __init__(self, *items):
        self.items = list(items)
        self.calls = 0

    def produce(self):
        self.calls += 1
        item = self.items.pop(0) if self.items else make_result()
        if isinstance(item, Exception):
            raise item
        return item


class ManualHandle:
    def __init__(self, delay, callback):
        self.delay = delay
        self.callback = callback
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class ManualScheduler:
    """Records timers instead of starting threads; tests fire them explicitly."""

    def __init__(self):
        self.handles = []

    def __call__(self, delay, callback):
        handle = ManualHandle(delay, callback)
        self.handles.append(handle)
        return handle

    def fire_all(self):
        # Fires even cancelled handles, like a timer thread that already woke up.
        for handle in list(self.handles):
            handle.callback()


@pytest.fixture()
def result() -> AnalysisResult:
    return make_result()


@pytest.fixture()
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture()
def fixed_clock():
    return lambda: datetime(2026, 10, 19, 8, 30, tzinfo=timezone.utc)
