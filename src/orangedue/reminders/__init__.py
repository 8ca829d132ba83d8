"""Reminder scheduling (asyncio timers keyed by task id and instant)."""
