"""
repobrowse - terminal repository browser
"""

__version__ = "0.3.0"
