from .base import Base

# import models so Alembic/autoloaders can discover mappers
from .product import Product  # noqa: F401
from .serial import TvSerial  # noqa: F401
from .purchase import ClientPurchase  # noqa: F401
from .seller import Seller, SellerSale  # noqa: F401
from .draw import Draw  # noqa: F401
from .coupon import IssuedCoupon  # noqa: F401

__all__ = [
    "Base",
    "ClientPurchase",
    "Draw",
    "IssuedCoupon",
    "Product",
    "Seller",
    "SellerSale",
    "TvSerial",
]
