"""API Layer — FastAPI routes, dependencies and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - Routes are thin: identity and wiring come from dependencies.py, rules
      from core/, transactions from services/
"""
