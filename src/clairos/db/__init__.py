"""Persistence layer for ClairOS."""
