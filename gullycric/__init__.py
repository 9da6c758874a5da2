"""
GullyCric Package

A local cricket management toolkit: match, team, player and score management
with mock/offline data sources, email and phone authentication flows, a
Flutter/Android development environment helper, and a git branch manager for
day-to-day branch workflows.
"""

__version__ = "1.0.0"
