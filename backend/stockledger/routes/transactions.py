# Overview: Flask API routes for stock movements and the ledger; parses input and returns envelopes.

"""
Transaction routes.

SECURITY: every route requires an authenticated identity (any role).
The acting user recorded on each ledger row is the token's user, never a
value from the request body.
"""

from flask import Blueprint, current_app, request

from ..decorators import get_current_user, require_auth
from ..models import Transaction
from ..responses import ok
from ..services import transaction_service
from ..validation import (
    ModelValidationPolicy,
    ValidationError,
    enforce_rules_stock_movement,
    validate_payload,
)

MOVEMENT_POLICY = ModelValidationPolicy(
    writable_fields={"productId", "quantity", "supplierId", "description"},
    aliases={
        "productId": "product_id",
        "quantity": "total_products",
        "supplierId": "supplier_id",
    },
)

transactions_bp = Blueprint("transactions", __name__, url_prefix="/api/transactions")


def _movement_patch() -> dict:
    payload = request.get_json(silent=True)
    if payload is None:
        raise ValidationError("Request body must be a JSON object")
    patch = validate_payload(model=Transaction, payload=payload, policy=MOVEMENT_POLICY, partial=True)
    enforce_rules_stock_movement(patch)
    return patch


@transactions_bp.post("/purchase")
@require_auth
def purchase_route():
    patch = _movement_patch()
    tx = transaction_service.restock(
        product_id=patch["product_id"],
        supplier_id=patch.get("supplier_id"),
        quantity=patch["total_products"],
        description=patch.get("description"),
        actor=get_current_user(),
    )
    return ok("Transaction Made Successfully", transaction=tx.to_dict())


@transactions_bp.post("/sell")
@require_auth
def sell_route():
    patch = _movement_patch()
    tx = transaction_service.sell(
        product_id=patch["product_id"],
        quantity=patch["total_products"],
        description=patch.get("description"),
        actor=get_current_user(),
    )
    return ok("Transaction Sold Successfully", transaction=tx.to_dict())


@transactions_bp.post("/return")
@require_auth
def return_route():
    patch = _movement_patch()
    tx = transaction_service.return_to_supplier(
        product_id=patch["product_id"],
        supplier_id=patch.get("supplier_id"),
        quantity=patch["total_products"],
        description=patch.get("description"),
        actor=get_current_user(),
    )
    return ok("Transaction Returned Successfully Initialized", transaction=tx.to_dict())


@transactions_bp.get("")
@transactions_bp.get("/all")
@require_auth
def list_transactions_route():
    """
    Newest-first page of the ledger.

    Query params:
    - page: int (optional) - zero-based page number, default 0
    - size: int (optional) - page size, default DEFAULT_PAGE_SIZE, clamped to MAX_PAGE_SIZE
    - searchText: str (optional) - matches description, status, product name or sku
    """
    page = request.args.get("page", default=0, type=int)
    size = request.args.get("size", default=current_app.config["DEFAULT_PAGE_SIZE"], type=int)
    size = min(size, current_app.config["MAX_PAGE_SIZE"])
    search_text = request.args.get("searchText")

    result = transaction_service.list_transactions(page=page, size=size, search_text=search_text)
    return ok(
        transactions=[t.to_dict() for t in result["items"]],
        totalPages=result["total_pages"],
        totalElements=result["total_elements"],
    )


@transactions_bp.get("/<int:transaction_id>")
@require_auth
def get_transaction_route(transaction_id: int):
    tx = transaction_service.get_transaction(transaction_id)
    return ok(
        transaction=tx.to_dict(include_product=True, include_user=True, include_supplier=True),
    )


@transactions_bp.get("/by-month-year")
@require_auth
def by_month_year_route():
    month = request.args.get("month", type=int)
    year = request.args.get("year", type=int)
    if month is None or year is None:
        raise ValidationError("month and year are required integers")

    rows = transaction_service.list_transactions_by_period(month=month, year=year)
    return ok(transactions=[t.to_dict(include_product=True) for t in rows])


@transactions_bp.put("/<int:transaction_id>")
@transactions_bp.put("/update/<int:transaction_id>")
@require_auth
def update_status_route(transaction_id: int):
    """Body is either a bare status ("COMPLETED") or {"status": "COMPLETED"}."""
    body = request.get_json(silent=True)
    if isinstance(body, dict):
        new_status = body.get("status")
    elif isinstance(body, str):
        new_status = body
    else:
        new_status = request.get_data(as_text=True).strip().strip('"') or None

    tx = transaction_service.update_status(transaction_id, new_status)
    return ok("Transaction Status Successfully Updated", transaction=tx.to_dict())
