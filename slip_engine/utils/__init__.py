"""
Shared helpers (identifier handling).
"""
