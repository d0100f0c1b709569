"""
Builder module - stateful editing sessions over the progression rules.
"""

from salvage_framework.builder.session import BuildSession

__all__ = ["BuildSession"]
