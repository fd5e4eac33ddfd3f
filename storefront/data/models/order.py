from sqlalchemy import Column, Integer, String, DateTime, Text
from datetime import datetime, timezone

from storefront.data.database import Base


class OrderModel(Base):
    __tablename__ = "orders"

    order_id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, nullable=False, index=True)

    customer_name = Column(String(255), nullable=False, default="")
    shipping_address = Column(Text, nullable=False, default="")

    # JSON text columns, read back through storefront.domain.schemas
    products = Column(Text, nullable=False)
    billing_details = Column(Text, nullable=True)

    payment_method = Column(String(50), nullable=False, default="cod")
    status = Column(String(30), nullable=False, default="submitted")
    order_date = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc), index=True)
