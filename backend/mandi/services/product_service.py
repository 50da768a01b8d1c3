"""
Product service for produce CRUD and price statistics.
"""
import logging
from typing import List
from sqlalchemy import func
from sqlalchemy.orm import Session
from mandi.core.errors import LedgerValidationError, NotFoundError
from mandi.core.utils import reject_nulls, round_weight
from mandi.db.session import commit
from mandi.models.product import Product
from mandi.models.transaction import Transaction, TransactionItem, TransactionStatus
from mandi.services.ledger_service import compute_price_statistics

logger = logging.getLogger(__name__)


def get_product(db: Session, product_id: int) -> Product:
    """Fetch a product by id, raising NotFoundError when absent."""
    product = db.query(Product).filter(Product.id == product_id).first()
    if not product:
        raise NotFoundError(f"Product with ID {product_id} not found")
    return product


def list_products(db: Session, active_only: bool = False) -> List[Product]:
    query = db.query(Product)
    if active_only:
        query = query.filter(Product.active.is_(True))
    return query.order_by(Product.name).all()


def _ensure_unique_name(db: Session, name: str, exclude_id: int = None) -> None:
    query = db.query(Product).filter(func.lower(Product.name) == name.strip().lower())
    if exclude_id is not None:
        query = query.filter(Product.id != exclude_id)
    if query.first():
        raise LedgerValidationError(f"Product '{name}' already exists")


def create_product(db: Session, data: dict) -> Product:
    name = (data.get("name") or "").strip()
    if not name:
        raise LedgerValidationError("Product name is required")
    _ensure_unique_name(db, name)

    product = Product(**{**data, "name": name}, unit="kg")
    db.add(product)
    commit(db)
    db.refresh(product)
    logger.info(f"Created product {product.id} ({product.name})")
    return product


def update_product(db: Session, product_id: int, updates: dict) -> Product:
    reject_nulls(updates, ("name", "active"))
    product = get_product(db, product_id)
    if "name" in updates:
        name = (updates["name"] or "").strip()
        if not name:
            raise LedgerValidationError("Product name cannot be empty")
        _ensure_unique_name(db, name, exclude_id=product_id)
        updates = {**updates, "name": name}
    for field, value in updates.items():
        setattr(product, field, value)
    commit(db)
    db.refresh(product)
    return product


def delete_product(db: Session, product_id: int) -> None:
    """Delete a product that was never sold. Sold products should be deactivated instead."""
    product = get_product(db, product_id)
    if db.query(TransactionItem.id).filter(TransactionItem.product_id == product_id).first():
        raise LedgerValidationError(
            f"Product {product_id} appears in transactions; deactivate it instead"
        )
    db.delete(product)
    commit(db)
    logger.info(f"Deleted product {product_id}")


def batch_update_products(db: Session, ids: List[int], updates: dict) -> int:
    if not ids:
        raise LedgerValidationError("No IDs provided for batch update")
    if not updates:
        raise LedgerValidationError("No changes detected to apply")

    products = db.query(Product).filter(Product.id.in_(ids)).all()
    missing = sorted(set(ids) - {p.id for p in products})
    if missing:
        raise NotFoundError(f"Product IDs not found: {missing}")

    for product in products:
        for field, value in updates.items():
            setattr(product, field, value)
    commit(db)
    logger.info(f"Batch updated {len(products)} products: {sorted(updates)}")
    return len(products)


def refresh_price_statistics(db: Session, product_id: int) -> Product:
    """Recompute the product's price statistics from its non-cancelled sales."""
    product = get_product(db, product_id)

    items = db.query(TransactionItem).join(
        Transaction, TransactionItem.transaction_id == Transaction.id
    ).filter(
        TransactionItem.product_id == product_id,
        Transaction.status != TransactionStatus.CANCELLED
    ).order_by(Transaction.transaction_date, TransactionItem.id).all()

    stats = compute_price_statistics(item.unit_price for item in items)
    for field, value in stats.items():
        setattr(product, field, value)
    product.last_unit_price_sold = items[-1].unit_price if items else None
    product.total_quantity_sold_kg = round_weight(sum(item.quantity for item in items)) if items else None

    commit(db)
    db.refresh(product)
    logger.info(f"Refreshed price statistics for product {product_id} from {len(items)} sales")
    return product
