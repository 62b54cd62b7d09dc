"""
Shared helpers for formatting and tracing.
"""
