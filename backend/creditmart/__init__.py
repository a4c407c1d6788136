"""CreditMart Application Package — credit marketplace order engine.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
