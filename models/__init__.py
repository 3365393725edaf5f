"""
models/ - Domain Layer
======================
Immutable, self-validating domain records.
"""
