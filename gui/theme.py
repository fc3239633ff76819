"""Theme primitives for the dashboard front-end."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Theme:
    """Base theme definition."""

    name: str = "Default"
    primary_color: str = "#e5e7eb"  # gray-200
    accent_color: str = "#06b6d4"  # cyan-500
    background_color: str = "#111827"  # gray-900
    panel_color: str = "#1f2937"  # gray-800
    alert_color: str = "#fca5a5"  # red-300

    def css(self) -> str:
        """Stylesheet injected once by the Streamlit app."""
        return f"""<style>
    #MainMenu {{visibility: hidden;}}
    footer {{visibility: hidden;}}
    .main-header {{
        font-size: 2.4rem;
        font-weight: 700;
        color: {self.primary_color};
        margin: 0.25rem 0;
    }}
    .subheader {{
        opacity: 0.8;
        margin-bottom: 1.25rem;
    }}
    .splash {{
        text-align: center;
        padding-top: 18vh;
    }}
    .splash h1 {{
        color: {self.accent_color};
        letter-spacing: 0.08em;
    }}
    .alert-card {{
        border: 1px solid {self.alert_color}55;
        background: {self.panel_color};
        border-radius: 12px;
        padding: 0.75rem 1rem;
        margin: 0.4rem 0;
    }}
    .alert-card b {{
        color: {self.alert_color};
    }}
    .statusbar {{
        position: fixed;
        bottom: 0;
        left: 0;
        right: 0;
        background: {self.panel_color}ee;
        border-top: 1px solid rgba(255,255,255,0.10);
        padding: 0.35rem 1rem;
        z-index: 1000;
        font-size: 0.85rem;
    }}
    </style>"""


@dataclass(frozen=True)
class ModernTheme(Theme):
    """Dark microscope theme with cyan accents."""

    name: str = "Modern"
    background_color: str = "#0b1220"
