"""
Gramps Memory gamification core

XP and levels, daily memory streaks, memory milestones and the XP ledger
behind the Gramps Memory storytelling app.
"""

__version__ = "0.1.0"
