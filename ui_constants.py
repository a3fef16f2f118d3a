"""
TONE CURVE EDITOR - UI Constants

Centralized theme colors, dimensions, timings and styling constants.
Import from here instead of hardcoding values throughout the codebase.

Usage:
    from ui_constants import Colors, Dimensions, Styles

    painter.setPen(QPen(QColor(Colors.GRID), 1))
    button.setFixedSize(*Dimensions.BUTTON_SMALL)
"""


class Colors:
    """Centralized color definitions for the curves editor theme."""

    # === Background Colors ===
    BACKGROUND_CANVAS = "#1e1e1e"   # Curve canvas fill
    BACKGROUND_DARK = "#2a2a2a"     # Standard widget background

    # === Lines ===
    GRID = "#3c3c3c"                # Quarter grid lines
    IDENTITY_LINE = "#505050"       # Dashed diagonal
    BORDER = "#646464"              # Canvas border
    HANDLE_OUTLINE = "#1e1e1e"      # Ring around control points

    # === Accent Colors ===
    ACCENT_PRIMARY = "#e67e22"      # Modified state on reset buttons
    ACCENT_DANGER = "#e74c3c"

    # === Curve Channel Colors ===
    CHANNEL_LUMA = "#cccccc"        # Luminance curve
    CHANNEL_RED = "#ff6b6b"         # Red channel curve
    CHANNEL_GREEN = "#6bcb77"       # Green channel curve
    CHANNEL_BLUE = "#4d96ff"        # Blue channel curve

    CHANNELS = {
        'luma': CHANNEL_LUMA,
        'red': CHANNEL_RED,
        'green': CHANNEL_GREEN,
        'blue': CHANNEL_BLUE,
    }

    # Alpha (0-255) for inactive curves and the histogram silhouette
    INACTIVE_CURVE_ALPHA = 70
    HISTOGRAM_ALPHA = 40


class Dimensions:
    """Centralized dimension constants for consistent sizing."""

    # === Button Sizes (width, height) ===
    BUTTON_SMALL = (24, 24)         # Reset channel button
    BUTTON_CHANNEL = (28, 28)       # L / R / G / B selectors

    # === Curves Canvas ===
    CURVES_MIN_SIZE = (260, 320)    # Minimum widget size
    CANVAS_MARGIN = 10              # Side margin around the canvas
    CANVAS_TOP = 45                 # Space reserved for channel buttons
    CANVAS_BOTTOM = 50              # Space reserved for the reset-all button
    GRID_DIVISIONS = 4

    # === Control Points ===
    POINT_RADIUS = 6                # Handle radius in pixels
    POINT_RADIUS_HOVER = 8
    HIT_RADIUS = 15                 # Hit box half-size in curve units (0-255)

    # === Line Widths ===
    CURVE_WIDTH_ACTIVE = 2.5
    CURVE_WIDTH_INACTIVE = 1


class Timing:
    """Animation durations in milliseconds."""

    HISTOGRAM_EXPAND_MS = 500
    HISTOGRAM_COLLAPSE_MS = 300


class Styles:
    """Reusable stylesheet snippets."""

    RESET_MODIFIED = (
        f"QPushButton {{ background-color: {Colors.ACCENT_PRIMARY}; "
        f"color: white; font-weight: bold; }}"
    )


def get_channel_button_style(color: str) -> str:
    """Style for a checkable channel selector button."""
    return f"""
        QPushButton {{
            border: 1px solid #555;
            border-radius: 14px;
            font-weight: bold;
            padding: 2px;
        }}
        QPushButton:checked {{
            background-color: {color};
            color: #1e1e1e;
            border: 2px solid #fff;
        }}
    """
