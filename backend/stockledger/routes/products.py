# Overview: Flask API routes for products; parses input and returns envelopes.

"""
Product management routes.

SECURITY: All routes require authentication.
- Read operations are open to any role
- Write operations require ADMIN

stockQuantity is accepted on create (opening balance) and on update
(manual correction); day-to-day stock changes go through /api/transactions.
"""

from flask import Blueprint, request

from ..decorators import require_auth, require_role
from ..models import Product
from ..responses import ok
from ..services import catalog_service
from ..validation import (
    ModelValidationPolicy,
    enforce_rules_product,
    validate_payload,
)

PRODUCT_POLICY = ModelValidationPolicy(
    writable_fields={"sku", "name", "description", "price", "stockQuantity", "expiryDate", "categoryId"},
    required_on_create={"sku", "name", "price"},
    aliases={
        "stockQuantity": "stock_quantity",
        "expiryDate": "expiry_date",
        "categoryId": "category_id",
    },
)

products_bp = Blueprint("products", __name__, url_prefix="/api/products")


@products_bp.post("/add")
@require_auth
@require_role("ADMIN")
def create_product_route():
    patch = validate_payload(model=Product, payload=request.get_json(silent=True), policy=PRODUCT_POLICY, partial=False)
    enforce_rules_product(patch)
    product = catalog_service.create_product(patch=patch)
    return ok("Product Successfully Saved", product=product.to_dict())


@products_bp.get("/all")
@require_auth
def list_products_route():
    return ok(products=[p.to_dict() for p in catalog_service.list_products()])


@products_bp.get("/<int:product_id>")
@require_auth
def get_product_route(product_id: int):
    return ok(product=catalog_service.get_product(product_id).to_dict())


@products_bp.put("/update/<int:product_id>")
@require_auth
@require_role("ADMIN")
def update_product_route(product_id: int):
    patch = validate_payload(model=Product, payload=request.get_json(silent=True), policy=PRODUCT_POLICY, partial=True)
    enforce_rules_product(patch)
    product = catalog_service.update_product(product_id, patch=patch)
    return ok("Product Successfully Updated", product=product.to_dict())


@products_bp.delete("/delete/<int:product_id>")
@require_auth
@require_role("ADMIN")
def delete_product_route(product_id: int):
    catalog_service.delete_product(product_id)
    return ok("Product Successfully Deleted")
