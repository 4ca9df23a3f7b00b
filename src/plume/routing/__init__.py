"""Routing — compiled route table, route results, and request tracking.

Routes are registered during setup and compiled into an immutable
lookup structure. Match results are tracked per request so view helpers
can reuse them.
"""
