"""
Value rules for catalog products.

Applied both on creation and on the effective result of a partial update,
so that an invalid patch is rejected before anything is written.
"""

from decimal import Decimal

from shopapp.domain.shop.entities import Product
from shopapp.domain.shop.errors import ValidationError

MIN_INITIAL_QUANTITY = 1


def check_product(product: Product) -> None:
    """Raise ValidationError if ``product`` breaks a catalog invariant."""
    if not product.name or not product.name.strip():
        raise ValidationError("name", "must not be blank")
    if product.wholesale_price is None or product.wholesale_price < Decimal("0"):
        raise ValidationError("wholesalePrice", "must be greater than or equal to 0")
    if product.retail_price is None or product.retail_price < Decimal("0"):
        raise ValidationError("retailPrice", "must be greater than or equal to 0")
    if product.quantity is None or product.quantity < 0:
        raise ValidationError("quantity", "must be greater than or equal to 0")


def check_new_product(product: Product) -> None:
    """New listings additionally need at least one unit of stock."""
    check_product(product)
    if product.quantity < MIN_INITIAL_QUANTITY:
        raise ValidationError("quantity", "initial stock must be at least 1")
