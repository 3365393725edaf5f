"""
utils/ - Shared helpers: logging, error types, field normalizers.
"""
