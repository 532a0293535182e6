"""Utility helpers for dgpt."""
