"""Declarative base and metadata for the CreditMart schema.

Engines and sessions live in infrastructure/database.py.
"""
