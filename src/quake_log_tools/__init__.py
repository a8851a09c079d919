"""
Quake Log Tools - Python package for Quake III: Arena server logs

This package parses server logs into matches and builds per-match kill
statistics: players, kill score per player and kills per means of death.
"""

__version__ = '0.1.0'
