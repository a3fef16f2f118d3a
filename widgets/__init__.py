"""
TONE CURVE EDITOR - Widgets Package

Re-exports all widget classes for convenient imports.
"""

# Curves editor
from widgets.curve_editor import CurvesWidget

__all__ = [
    'CurvesWidget',
]
