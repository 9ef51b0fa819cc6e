"""
Matchday modules.

Each module is a bounded context with its own models, interfaces,
exceptions and services:
- roles: reactive session store and role routing
- profiles: profile lookup and outcome classification
- session: bootstrap state machine driven by identity notifications
- activity: activity-log queries and statistics
"""
