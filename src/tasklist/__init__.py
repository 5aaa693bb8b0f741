"""
tasklist - personal task tracker with durable undo/redo.

Components:
- tasks/: data structures (Task, TaskStatus) and the SQLite task store
- history/: inverse operations, the undo/redo ledger and the controller
- storage/: SQLite connection and transaction handling
- cli/: click commands and rich rendering
"""

__version__ = "0.3.0"
