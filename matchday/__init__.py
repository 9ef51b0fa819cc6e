"""
Matchday session core.

Session bootstrap, role authorization and activity-log aggregation for the
Matchday tournament client.
"""

__version__ = "0.1.0"
