"""
tk colors - Print the terminal palette.

Helps pick values for the TIMEKEEPER_STYLE_* settings, e.g.
TIMEKEEPER_STYLE_REF="bold color(45)".
"""

from timekeeper.lib.context import AppContext

PALETTE_SIZE = 256


def cmd_colors(args, app: AppContext) -> int:
    for i in range(PALETTE_SIZE):
        app.view.console.print(f"Color {i}", style=f"color({i})")
    return 0
