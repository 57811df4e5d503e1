"""Configuration for repobrowse."""
