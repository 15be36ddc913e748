"""Signal-driven workflow domain.

This package introduces first-class types for:
- Signals (marker files) and the ordered catalogue that ranks them
- Workflow routines (pull, optional tests, next-stage marker)
- The marker lifecycle state machine
- The dispatcher that runs one routine per invocation
- The append-only workflow event log
"""

__all__: list[str] = []
