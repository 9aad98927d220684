"""Huddle: anonymous, location-based activity posts."""
