"""Metric tile shown in the dashboard's summary and environment panels."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class StatCard:
    label: str
    value: str
    icon: str = ""
    helper_text: str = ""

    @property
    def title(self) -> str:
        return f"{self.icon} {self.label}".strip()
