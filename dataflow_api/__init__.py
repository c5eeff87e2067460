"""
DataFlow Analytics API
Read endpoints over the dashboard store, a synthetic realtime feed and
cookie-backed sessions.
"""

__version__ = "1.0.0"
