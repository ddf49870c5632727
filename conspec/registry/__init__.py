"""Registry — the name -> spec mapping and the speced-function table.

The registry provides:
- Definition: store specs under qualified names, last write wins
- Resolution: follow name references lazily, detecting cycles
- Function slots: the callable each speced function dispatches through
- Instrumentation: which functions are currently wrapped
"""
