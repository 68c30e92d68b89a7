"""
vinput - virtual input scripting

Compiles vinput scripts and plays them back as keyboard and mouse events.
"""

__version__ = "0.1.0"
