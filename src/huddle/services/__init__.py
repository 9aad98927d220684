# src/huddle/services/__init__.py
"""Service layer: visibility query, identity, mutation, notifications, geocoding."""
