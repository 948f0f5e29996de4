"""
Constants for the clashtui dashboard.
"""

from typing import List, Tuple

# Group kinds shown in the Groups list; every other proxy type is a member only
GROUP_KINDS: Tuple[str, ...] = ("Selector", "URLTest", "Fallback")

# Routing modes in cycle order
MODE_CYCLE: List[str] = ["Rule", "Global", "Direct"]

INITIAL_MODE: str = "Unknown"
INITIAL_STATUS: str = "Press ? for help"

# Tab labels with their digit shortcuts
TAB_TITLES: List[str] = ["Proxies [1]", "Rules [2]", "Conns [3]"]

HELP_TEXT: str = """
  Navigation
  ──────────────────────────────
  ↑/k       Move up
  ↓/j       Move down
  ←/h       Prev tab / Focus groups
  →/l       Next tab / Focus proxies
  Tab       Switch focus
  1-3       Switch tabs (Proxies/Rules/Conns)

  Actions
  ──────────────────────────────
  Enter     Select proxy
  t         Test delay for selected proxy
  m         Switch mode (Rule/Global/Direct)
  r         Refresh data

  General
  ──────────────────────────────
  ?         Toggle this help
  q/Esc     Quit
"""

# Hint line under the status message
KEY_HINTS: List[Tuple[str, str]] = [
    ("?", "Help"),
    ("q", "Quit"),
    ("Enter", "Select"),
    ("t", "Test"),
    ("r", "Refresh"),
    ("m", "Mode"),
    ("Tab", "Switch Focus"),
]
