"""
Dependency Injection
====================

Per-environment container and its providers.
"""
from .container import EnvironmentContainer

__all__ = ["EnvironmentContainer"]
