"""
Snooker Draft Contest - leaderboard and maximum-points bound.
"""
__version__ = "0.1.0"
