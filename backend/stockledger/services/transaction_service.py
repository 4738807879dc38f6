# Overview: Inventory transaction engine; stock movements and the ledger rows that record them.

"""
Stock Ledger Transaction Engine (authoritative)

Stock model:
- Product.stock_quantity is the current on-hand counter.
- Every stock movement (PURCHASE, SALE, RETURN_TO_SUPPLIER) changes that
  counter AND appends one Transaction row. Both are written in the same
  session commit; a failure anywhere rolls back both.

Movement rules:
- PURCHASE:           stock += qty, status COMPLETED, total_price = price * qty, supplier required
- SALE:               stock -= qty, status COMPLETED, total_price = price * qty, no supplier
- RETURN_TO_SUPPLIER: stock -= qty, status PROCESSING, total_price = 0, supplier required

Checks run in this order and before anything is written:
    quantity -> supplier reference present -> product exists -> supplier exists -> stock sufficiency

Stock sufficiency:
- ALLOW_NEGATIVE_STOCK=False (default): a SALE/RETURN that would leave stock
  below zero raises InsufficientStockError.
- ALLOW_NEGATIVE_STOCK=True: the movement is applied regardless.

Status changes:
- Permissive by default (any status -> any status); every change is logged.
- ENFORCE_STATUS_TRANSITIONS=True applies STATUS_TRANSITIONS below.

Concurrency:
- The product row is loaded FOR UPDATE and carries a version counter.
  Two writers racing on the same product make the loser's flush raise
  StaleDataError; run_with_retry rolls back and replays the whole unit.
"""

from __future__ import annotations

import math
from decimal import Decimal

from flask import current_app
from sqlalchemy import or_

from ..extensions import db
from ..errors import InsufficientStockError, MissingReferenceError, NotFoundError, StatusTransitionError
from ..models import Product, Supplier, Transaction, User, VALID_TRANSACTION_STATUSES
from ..time_utils import month_bounds, utcnow
from ..validation import MAX_INTEGER, ValidationError
from .concurrency import lock_for_update, run_with_retry


MAX_DESCRIPTION_LENGTH = 500

# Strict-mode table. Same-status updates are always accepted.
STATUS_TRANSITIONS = {
    "PENDING": {"PROCESSING", "COMPLETED", "CANCELED"},
    "PROCESSING": {"COMPLETED", "CANCELED"},
    "COMPLETED": set(),
    "CANCELED": set(),
}


# ---------------------------------------------------------------------------
# Input checks
# ---------------------------------------------------------------------------

def _validate_quantity(quantity) -> int:
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise ValidationError("quantity must be a positive integer")
    if quantity <= 0:
        raise ValidationError("quantity must be a positive integer")
    if quantity > MAX_INTEGER:
        raise ValidationError(f"quantity cannot exceed {MAX_INTEGER}")
    return quantity


def _validate_description(description: str | None) -> str | None:
    if description is None:
        return None
    description = str(description).strip()
    if len(description) > MAX_DESCRIPTION_LENGTH:
        raise ValidationError(f"description exceeds max length {MAX_DESCRIPTION_LENGTH}")
    return description or None


def validate_status(status) -> str:
    """Normalize a status value; unknown values raise ValidationError."""
    if status is None or not str(status).strip():
        raise ValidationError("status is required")
    normalized = str(status).strip().upper()
    if normalized not in VALID_TRANSACTION_STATUSES:
        raise ValidationError(
            f"Invalid status '{status}'. Must be one of: {', '.join(sorted(VALID_TRANSACTION_STATUSES))}"
        )
    return normalized


def can_transition(from_status: str, to_status: str) -> bool:
    if from_status == to_status:
        return True
    return to_status in STATUS_TRANSITIONS.get(from_status, set())


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------

def _load_product_for_update(product_id: int) -> Product:
    product = lock_for_update(db.session.query(Product).filter_by(id=product_id)).first()
    if product is None:
        raise NotFoundError("Product Not Found")
    return product


def _load_supplier(supplier_id: int) -> Supplier:
    supplier = db.session.get(Supplier, supplier_id)
    if supplier is None:
        raise NotFoundError("Supplier Not Found")
    return supplier


def _ensure_sufficient_stock(product: Product, quantity: int) -> None:
    if current_app.config.get("ALLOW_NEGATIVE_STOCK", False):
        return
    if product.stock_quantity - quantity < 0:
        raise InsufficientStockError(
            f"Insufficient stock for product {product.id}: "
            f"available {product.stock_quantity}, requested {quantity}"
        )


# ---------------------------------------------------------------------------
# Stock movements
# ---------------------------------------------------------------------------

def _record_movement(
    *,
    transaction_type: str,
    product_id: int,
    supplier_id: int | None,
    quantity,
    description: str | None,
    actor: User,
) -> Transaction:
    """
    Shared unit of work for every stock movement.

    The closure re-reads the product on each attempt so a retry after
    StaleDataError sees the winning writer's stock level.
    """
    quantity = _validate_quantity(quantity)
    description = _validate_description(description)
    supplier_required = transaction_type in ("PURCHASE", "RETURN_TO_SUPPLIER")
    if supplier_required and supplier_id is None:
        raise MissingReferenceError("Supplier Id is Required")
    if actor is None:
        raise ValidationError("actor is required")

    def _op():
        product = _load_product_for_update(product_id)
        supplier = _load_supplier(supplier_id) if supplier_required else None

        if transaction_type == "PURCHASE":
            if product.stock_quantity + quantity > MAX_INTEGER:
                raise ValidationError(f"resulting stock would exceed {MAX_INTEGER}")
            delta = quantity
            status = "COMPLETED"
            total_price = Decimal(product.price) * quantity
        elif transaction_type == "SALE":
            _ensure_sufficient_stock(product, quantity)
            delta = -quantity
            status = "COMPLETED"
            total_price = Decimal(product.price) * quantity
        else:
            _ensure_sufficient_stock(product, quantity)
            delta = -quantity
            status = "PROCESSING"
            total_price = Decimal("0.00")

        product.stock_quantity = product.stock_quantity + delta

        tx = Transaction(
            transaction_type=transaction_type,
            status=status,
            total_products=quantity,
            total_price=total_price,
            description=description,
            product_id=product.id,
            user_id=actor.id,
            supplier_id=supplier.id if supplier is not None else None,
        )
        db.session.add(tx)
        db.session.commit()

        current_app.logger.info(
            "Recorded %s id=%s product=%s qty=%s stock=%s user=%s",
            transaction_type, tx.id, product.id, quantity, product.stock_quantity, actor.id,
        )
        return tx

    return run_with_retry(_op)


def restock(
    *,
    product_id: int,
    supplier_id: int | None,
    quantity: int,
    description: str | None = None,
    actor: User,
) -> Transaction:
    """Receive goods from a supplier: stock goes up, ledger row is PURCHASE/COMPLETED."""
    return _record_movement(
        transaction_type="PURCHASE",
        product_id=product_id,
        supplier_id=supplier_id,
        quantity=quantity,
        description=description,
        actor=actor,
    )


def sell(
    *,
    product_id: int,
    quantity: int,
    description: str | None = None,
    actor: User,
) -> Transaction:
    return _record_movement(
        transaction_type="SALE",
        product_id=product_id,
        supplier_id=None,
        quantity=quantity,
        description=description,
        actor=actor,
    )


def return_to_supplier(
    *,
    product_id: int,
    supplier_id: int | None,
    quantity: int,
    description: str | None = None,
    actor: User,
) -> Transaction:
    """
    Send goods back to a supplier.

    Stock leaves immediately but the row starts in PROCESSING with a zero
    price; settling the return is a later status update.
    """
    return _record_movement(
        transaction_type="RETURN_TO_SUPPLIER",
        product_id=product_id,
        supplier_id=supplier_id,
        quantity=quantity,
        description=description,
        actor=actor,
    )


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------

def list_transactions(*, page: int = 0, size: int = 1000, search_text: str | None = None) -> dict:
    """
    Newest-first page of the ledger.

    page is zero-based. search_text matches (case-insensitive substring)
    description, status, product name or product sku.

    Returns {"items", "total_pages", "total_elements"}.
    """
    if page < 0:
        raise ValidationError("page must be >= 0")
    if size <= 0:
        raise ValidationError("size must be > 0")

    q = db.session.query(Transaction)
    if search_text and search_text.strip():
        needle = search_text.strip()
        q = q.outerjoin(Product, Transaction.product_id == Product.id).filter(
            or_(
                Transaction.description.icontains(needle, autoescape=True),
                Transaction.status.icontains(needle, autoescape=True),
                Product.name.icontains(needle, autoescape=True),
                Product.sku.icontains(needle, autoescape=True),
            )
        )

    total_elements = q.count()
    items = (
        q.order_by(Transaction.id.desc())
        .offset(page * size)
        .limit(size)
        .all()
    )
    return {
        "items": items,
        "total_pages": math.ceil(total_elements / size) if total_elements else 0,
        "total_elements": total_elements,
    }


def get_transaction(transaction_id: int) -> Transaction:
    tx = db.session.get(Transaction, transaction_id)
    if tx is None:
        raise NotFoundError("Transaction Not Found")
    return tx


def list_transactions_by_period(*, month: int, year: int) -> list[Transaction]:
    """All ledger rows created within one calendar month, oldest first."""
    try:
        start, end = month_bounds(month, year)
    except ValueError as exc:
        raise ValidationError(str(exc)) from exc

    return (
        db.session.query(Transaction)
        .filter(Transaction.created_at >= start, Transaction.created_at < end)
        .order_by(Transaction.id.asc())
        .all()
    )


def list_user_transactions(user_id: int) -> User:
    user = db.session.get(User, user_id)
    if user is None:
        raise NotFoundError("User Not Found")
    return user


# ---------------------------------------------------------------------------
# Status
# ---------------------------------------------------------------------------

def update_status(transaction_id: int, new_status) -> Transaction:
    """
    Change a ledger row's status. Nothing else on the row is touched.

    Raises:
        ValidationError: unknown status value
        NotFoundError: no such transaction
        StatusTransitionError: strict mode and the move is not in STATUS_TRANSITIONS
    """
    new_status = validate_status(new_status)

    tx = get_transaction(transaction_id)
    old_status = tx.status

    if current_app.config.get("ENFORCE_STATUS_TRANSITIONS", False) and not can_transition(old_status, new_status):
        raise StatusTransitionError(f"Cannot change status from {old_status} to {new_status}")

    tx.status = new_status
    tx.updated_at = utcnow()
    db.session.commit()

    current_app.logger.info(
        "Transaction id=%s status %s -> %s", tx.id, old_status, new_status,
    )
    return tx
