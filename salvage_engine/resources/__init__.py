"""
Resources module - reference data loading.
"""

from salvage_engine.resources.database import ReferenceDatabase

__all__ = ["ReferenceDatabase"]
