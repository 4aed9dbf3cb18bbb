"""
Test support utilities for descriptor-spine tests.

Helpers that don't fit as pytest fixtures but are shared across test
packages live here (see ``builders``).
"""
