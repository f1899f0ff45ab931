# src/version.py - v2
__version__ = "0.2.0"
