"""Utility helpers for repobrowse."""
