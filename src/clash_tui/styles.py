"""
CSS styles for the clashtui dashboard.

Contains:
- get_css: CSS for the dashboard screen
- get_help_css: CSS for the help overlay
"""

from .models import ColorTheme, THEME


def get_css(theme: ColorTheme = THEME) -> str:
    """Generate CSS for the dashboard screen using theme colors."""
    return f"""
DashboardScreen {{
    background: {theme.background};
    layout: vertical;
}}

#header {{
    height: 3;
    border: round {theme.border};
    border-title-color: {theme.text};
}}

#proxies-tab {{
    layout: horizontal;
    height: 1fr;
}}

#groups {{
    width: 35%;
}}

#members {{
    width: 65%;
}}

ListPanel {{
    height: 1fr;
    border: round {theme.border};
    border-title-color: {theme.text};
}}

/* Panel with keyboard focus */
ListPanel.focused {{
    border: round {theme.primary};
}}

#status-bar {{
    height: 4;
    border: round {theme.border};
}}
"""


def get_help_css(theme: ColorTheme = THEME) -> str:
    """Generate CSS for the help overlay."""
    return f"""
HelpScreen {{
    align: center middle;
}}

#help {{
    width: 60%;
    height: 70%;
    background: {theme.surface};
    color: {theme.text};
    border: round {theme.primary};
}}
"""
