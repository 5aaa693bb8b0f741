"""
History subsystem.

Components:
- operations.py: inverse operations (Recreate / Remove / ReinstateFields) and their JSON codec
- ledger.py: SQLite-backed undo and redo logs
- controller.py: wraps mutations with history bookkeeping, runs undo/redo
"""
