"""Services Layer — the imperative shell around the pure order rules.

Invariants:
    - Services receive the request AsyncSession explicitly; none opens its own
      except NotificationSink, which must outlive the order transaction
    - Balance and stock writes happen only in credit_ledger.py and catalog_store.py
"""
