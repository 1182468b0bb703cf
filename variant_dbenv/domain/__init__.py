"""
Domain Layer
============

Variant records and collection bindings.
This layer has no dependencies on external frameworks or infrastructure.

Contains:
- Models: SubmittedVariant, ClusteredVariant, DocumentKind
- Constants: Collection bindings
- Repository Interfaces: Abstract contracts for data access
"""
