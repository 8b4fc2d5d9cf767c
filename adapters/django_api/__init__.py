"""
POS Django HTTP adapter.
Thin framework glue over core.security.AccessGuard.
"""
