# Overview: Flask API routes for categories; parses input and returns envelopes.

from flask import Blueprint, request

from ..decorators import require_auth, require_role
from ..models import Category
from ..responses import ok
from ..services import catalog_service
from ..validation import ModelValidationPolicy, validate_payload

CATEGORY_POLICY = ModelValidationPolicy(
    writable_fields={"name"},
    required_on_create={"name"},
)

categories_bp = Blueprint("categories", __name__, url_prefix="/api/categories")


@categories_bp.post("/add")
@require_auth
@require_role("ADMIN")
def create_category_route():
    patch = validate_payload(model=Category, payload=request.get_json(silent=True), policy=CATEGORY_POLICY, partial=False)
    category = catalog_service.create_category(name=patch["name"])
    return ok("Category Successfully Saved", category=category.to_dict())


@categories_bp.get("/all")
@require_auth
def list_categories_route():
    return ok(categories=[c.to_dict() for c in catalog_service.list_categories()])


@categories_bp.get("/<int:category_id>")
@require_auth
def get_category_route(category_id: int):
    category = catalog_service.get_category(category_id)
    return ok(category=category.to_dict(include_products=True))


@categories_bp.put("/update/<int:category_id>")
@require_auth
@require_role("ADMIN")
def update_category_route(category_id: int):
    patch = validate_payload(model=Category, payload=request.get_json(silent=True), policy=CATEGORY_POLICY, partial=False)
    category = catalog_service.update_category(category_id, name=patch["name"])
    return ok("Category Successfully Updated", category=category.to_dict())


@categories_bp.delete("/delete/<int:category_id>")
@require_auth
@require_role("ADMIN")
def delete_category_route(category_id: int):
    catalog_service.delete_category(category_id)
    return ok("Category Successfully Deleted")
