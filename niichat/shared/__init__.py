"""Shared data models, placeholder helpers and repositories."""
