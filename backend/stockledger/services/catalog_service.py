# Overview: Category, supplier and product CRUD used by the catalog routes.

"""
Catalog Service

Plain create/read/update/delete for the reference data the ledger points at.

RULES:
- Category names and product SKUs are unique (ConflictError on duplicates)
- Rows referenced by ledger transactions cannot be deleted (ConflictError)
- Product edits go through run_with_retry because the transaction engine
  writes the same row (stock_quantity) concurrently
"""

from __future__ import annotations

from decimal import Decimal

from ..extensions import db
from ..errors import NotFoundError
from ..models import Category, Product, Supplier, Transaction
from ..validation import ConflictError, ValidationError
from .concurrency import run_with_retry


PRODUCT_MUTABLE_FIELDS = {"sku", "name", "description", "price", "stock_quantity", "expiry_date", "category_id"}
SUPPLIER_MUTABLE_FIELDS = {"name", "address"}


def _require_name(name: str | None, label: str = "name") -> str:
    if name is None or not str(name).strip():
        raise ValidationError(f"{label} is required")
    return str(name).strip()


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------

def get_category(category_id: int) -> Category:
    category = db.session.get(Category, category_id)
    if category is None:
        raise NotFoundError("Category Not Found")
    return category


def list_categories() -> list[Category]:
    return db.session.query(Category).order_by(Category.id.desc()).all()


def _ensure_category_name_free(name: str, exclude_id: int | None = None) -> None:
    q = db.session.query(Category).filter(db.func.lower(Category.name) == name.lower())
    if exclude_id is not None:
        q = q.filter(Category.id != exclude_id)
    if q.first() is not None:
        raise ConflictError(f"Category '{name}' already exists")


def create_category(*, name: str) -> Category:
    name = _require_name(name)
    _ensure_category_name_free(name)
    category = Category(name=name)
    db.session.add(category)
    db.session.commit()
    return category


def update_category(category_id: int, *, name: str) -> Category:
    category = get_category(category_id)
    name = _require_name(name)
    _ensure_category_name_free(name, exclude_id=category.id)
    category.name = name
    db.session.commit()
    return category


def delete_category(category_id: int) -> None:
    category = get_category(category_id)
    if category.products:
        raise ConflictError("Category still has products assigned")
    db.session.delete(category)
    db.session.commit()


# ---------------------------------------------------------------------------
# Suppliers
# ---------------------------------------------------------------------------

def get_supplier(supplier_id: int) -> Supplier:
    supplier = db.session.get(Supplier, supplier_id)
    if supplier is None:
        raise NotFoundError("Supplier Not Found")
    return supplier


def list_suppliers() -> list[Supplier]:
    return db.session.query(Supplier).order_by(Supplier.id.desc()).all()


def create_supplier(*, patch: dict) -> Supplier:
    supplier = Supplier(
        name=_require_name(patch.get("name")),
        address=patch.get("address"),
    )
    db.session.add(supplier)
    db.session.commit()
    return supplier


def update_supplier(supplier_id: int, *, patch: dict) -> Supplier:
    supplier = get_supplier(supplier_id)
    for key, value in patch.items():
        if key not in SUPPLIER_MUTABLE_FIELDS:
            continue
        if key == "name":
            value = _require_name(value)
        setattr(supplier, key, value)
    db.session.commit()
    return supplier


def delete_supplier(supplier_id: int) -> None:
    supplier = get_supplier(supplier_id)
    if db.session.query(Transaction.id).filter_by(supplier_id=supplier.id).first() is not None:
        raise ConflictError("Supplier has recorded transactions and cannot be deleted")
    db.session.delete(supplier)
    db.session.commit()


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------

def get_product(product_id: int) -> Product:
    product = db.session.get(Product, product_id)
    if product is None:
        raise NotFoundError("Product Not Found")
    return product


def list_products() -> list[Product]:
    return db.session.query(Product).order_by(Product.id.desc()).all()


def _ensure_sku_free(sku: str, exclude_id: int | None = None) -> None:
    q = db.session.query(Product).filter(Product.sku == sku)
    if exclude_id is not None:
        q = q.filter(Product.id != exclude_id)
    if q.first() is not None:
        raise ConflictError(f"SKU '{sku}' already exists")


def create_product(*, patch: dict) -> Product:
    """Create a product from a validated patch (column-keyed)."""
    if patch.get("category_id") is not None:
        get_category(patch["category_id"])

    sku = _require_name(patch.get("sku"), "sku")
    _ensure_sku_free(sku)

    product = Product(
        sku=sku,
        name=_require_name(patch.get("name")),
        description=patch.get("description"),
        price=patch.get("price") if patch.get("price") is not None else Decimal("0.00"),
        stock_quantity=patch.get("stock_quantity") or 0,
        expiry_date=patch.get("expiry_date"),
        category_id=patch.get("category_id"),
    )
    db.session.add(product)
    db.session.commit()
    return product


def apply_product_patch(p: Product, patch: dict) -> None:
    for k, v in patch.items():
        if k not in PRODUCT_MUTABLE_FIELDS:
            continue
        setattr(p, k, v)


def update_product(product_id: int, *, patch: dict) -> Product:
    """
    Partial product edit. Runs under retry: a concurrent stock movement bumps
    the row version, which surfaces here as StaleDataError.
    """
    def _op():
        product = get_product(product_id)

        if patch.get("category_id") is not None:
            get_category(patch["category_id"])
        if patch.get("sku") is not None:
            _ensure_sku_free(patch["sku"], exclude_id=product.id)
        for required in ("sku", "name", "price"):
            if required in patch and patch[required] is None:
                raise ValidationError(f"{required} cannot be null")

        apply_product_patch(product, patch)
        db.session.commit()
        return product

    return run_with_retry(_op)


def delete_product(product_id: int) -> None:
    product = get_product(product_id)
    if db.session.query(Transaction.id).filter_by(product_id=product.id).first() is not None:
        raise ConflictError("Product has recorded transactions and cannot be deleted")
    db.session.delete(product)
    db.session.commit()
