"""
Application Layer
=================

Accessioning services that orchestrate domain models and repositories.
"""
