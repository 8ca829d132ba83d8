"""
orangedue: personal lists and dated tasks held in memory, with timed reminders.

Components:
- records/: in-memory store, task queries, stats, backup codec
- reminders/: asyncio reminder scheduler
- api/: Result-envelope facade for the presentation layer
- cli/, connectors/: console front-end
"""

__version__ = "0.1.0"
