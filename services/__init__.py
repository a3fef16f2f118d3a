"""
TONE CURVE EDITOR - Services Layer

Background evaluation services.
"""

from services.preview_service import PreviewService, PreviewWorker

__all__ = [
    'PreviewService',
    'PreviewWorker',
]
