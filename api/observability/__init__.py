"""
Tracing and logging setup.
"""
