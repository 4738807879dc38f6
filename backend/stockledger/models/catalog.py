from __future__ import annotations

from decimal import Decimal

from ..extensions import db
from stockledger.time_utils import to_utc_z, utcnow


def _money(value: Decimal | None) -> str | None:
    # Decimal -> fixed two-place string so JSON never sees binary floats
    if value is None:
        return None
    return f"{Decimal(value):.2f}"


class Category(db.Model):
    """Product grouping. Names are globally unique."""
    __tablename__ = "categories"
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False, unique=True)

    products = db.relationship("Product", back_populates="category", lazy=True)

    def __repr__(self) -> str:
        return f"<Category id={self.id} name={self.name!r}>"

    def to_dict(self, *, include_products: bool = False) -> dict:
        data = {
            "id": self.id,
            "name": self.name,
        }
        if include_products:
            data["products"] = [p.to_dict() for p in self.products]
        return data


class Supplier(db.Model):
    __tablename__ = "suppliers"
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    address = db.Column(db.String(512), nullable=True)

    def __repr__(self) -> str:
        return f"<Supplier id={self.id} name={self.name!r}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "address": self.address,
        }


class Product(db.Model):
    """
    Product master data plus the current stock level.

    stock_quantity is a stored counter, not a ledger-derived sum. It is written
    by two disjoint paths: the transaction engine (stock movements) and catalog
    edits (name/price/description). Both go through the same row, so the
    version_id column turns a lost update into StaleDataError instead of a
    silent overwrite.
    """
    __tablename__ = "products"
    __table_args__ = (
        db.Index("ix_products_name", "name"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)

    sku = db.Column(db.String(64), nullable=False, unique=True)
    name = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=True)

    price = db.Column(db.Numeric(12, 2), nullable=False, default=Decimal("0.00"))
    stock_quantity = db.Column(db.Integer, nullable=False, default=0)

    expiry_date = db.Column(db.DateTime(timezone=True), nullable=True)

    category_id = db.Column(db.Integer, db.ForeignKey("categories.id"), nullable=True, index=True)

    version_id = db.Column(db.Integer, nullable=False, default=1)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=True, onupdate=utcnow)

    category = db.relationship("Category", back_populates="products")
    __mapper_args__ = {"version_id_col": version_id}

    def __repr__(self) -> str:
        return f"<Product id={self.id} sku={self.sku!r} stock={self.stock_quantity}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "sku": self.sku,
            "name": self.name,
            "description": self.description,
            "price": _money(self.price),
            "stockQuantity": self.stock_quantity,
            "categoryId": self.category_id,
            "expiryDate": to_utc_z(self.expiry_date),
            "versionId": self.version_id,
            "createdAt": to_utc_z(self.created_at),
            "updatedAt": to_utc_z(self.updated_at),
        }
