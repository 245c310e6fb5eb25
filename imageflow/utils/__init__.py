# imageflow/utils/__init__.py
"""
Shared helpers for the HTTP layer.
"""
