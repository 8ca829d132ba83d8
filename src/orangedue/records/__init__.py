"""
Record subsystem.

Components:
- models.py: TaskList / Task records and patch validation
- store.py: in-memory RecordStore (single writer, monotonic ids)
- query.py: pure task filtering and ordering
- stats.py: completion counts and the per-day heatmap
- backup.py: JSON backup export and merge-on-import
"""
