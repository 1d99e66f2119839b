"""Pet health record keeping.

This package contains the schedule record model, the in-memory event store
and the derived dashboard views, isolated from any UI for easy testing.
"""
