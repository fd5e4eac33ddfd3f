from sqlalchemy import Column, Integer, String, Numeric, Text

from storefront.data.database import Base


class ProductModel(Base):
    """Catalog row, read-only from the cart and order side."""
    __tablename__ = "products"

    product_id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    category = Column(String(100), nullable=True)
    image = Column(String(500), nullable=True)
    description = Column(Text, nullable=True)
