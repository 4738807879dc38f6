# Overview: Flask API routes for suppliers; parses input and returns envelopes.

from flask import Blueprint, request

from ..decorators import require_auth, require_role
from ..models import Supplier
from ..responses import ok
from ..services import catalog_service
from ..validation import ModelValidationPolicy, validate_payload

SUPPLIER_POLICY = ModelValidationPolicy(
    writable_fields={"name", "address"},
    required_on_create={"name"},
)

suppliers_bp = Blueprint("suppliers", __name__, url_prefix="/api/suppliers")


@suppliers_bp.post("/add")
@require_auth
@require_role("ADMIN")
def create_supplier_route():
    patch = validate_payload(model=Supplier, payload=request.get_json(silent=True), policy=SUPPLIER_POLICY, partial=False)
    supplier = catalog_service.create_supplier(patch=patch)
    return ok("Supplier Successfully Saved", supplier=supplier.to_dict())


@suppliers_bp.get("/all")
@require_auth
def list_suppliers_route():
    return ok(suppliers=[s.to_dict() for s in catalog_service.list_suppliers()])


@suppliers_bp.get("/<int:supplier_id>")
@require_auth
def get_supplier_route(supplier_id: int):
    return ok(supplier=catalog_service.get_supplier(supplier_id).to_dict())


@suppliers_bp.put("/update/<int:supplier_id>")
@require_auth
@require_role("ADMIN")
def update_supplier_route(supplier_id: int):
    patch = validate_payload(model=Supplier, payload=request.get_json(silent=True), policy=SUPPLIER_POLICY, partial=True)
    supplier = catalog_service.update_supplier(supplier_id, patch=patch)
    return ok("Supplier Successfully Updated", supplier=supplier.to_dict())


@suppliers_bp.delete("/delete/<int:supplier_id>")
@require_auth
@require_role("ADMIN")
def delete_supplier_route(supplier_id: int):
    catalog_service.delete_supplier(supplier_id)
    return ok("Supplier Successfully Deleted")
