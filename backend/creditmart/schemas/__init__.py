"""Pydantic Schemas — request/response validation for API endpoints.

Invariants:
    - Schemas validate shape at the system boundary; business rules
      (quantity >= 1, amount > 0, stock, credits) stay in core/ so they return
      the domain error codes
    - Domain enums from core/ used for status fields
"""
