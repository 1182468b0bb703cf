"""
Infrastructure Layer
===================

External concerns and framework-specific implementations.
This layer depends on the domain layer but not vice versa.

Contains:
- MongoDB connection, document mapper and template
- Bulk upsert operation
- Repository implementations
"""
