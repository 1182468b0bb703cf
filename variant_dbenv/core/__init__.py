"""
Core
====

Process settings, properties parsing and the error taxonomy.
"""
