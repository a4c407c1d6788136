"""ORM Models — SQLAlchemy declarative models for all persisted entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - Row invariants (balance >= 0, stock >= 0) are enforced by the services
      layer; CHECK constraints are a backstop only

Design Decisions:
    - One file per entity
    - All models imported here so Base.metadata is complete before create_all
"""

from creditmart.models.user import User  # noqa: F401
from creditmart.models.product import Product  # noqa: F401
from creditmart.models.order import Order  # noqa: F401
from creditmart.models.notification import Notification  # noqa: F401
from creditmart.models.payment_detail import PaymentDetail  # noqa: F401
from creditmart.models.app_setting import AppSetting  # noqa: F401
