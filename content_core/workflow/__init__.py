"""
Workflow helpers for content records.
"""

from .state_changer import StateChanger

__all__ = ["StateChanger"]
