from __future__ import annotations

from typing import Literal

from ..extensions import db
from stockledger.time_utils import to_utc_z, utcnow
from .catalog import _money


# Ledger enumerations (validated in transaction_service)
VALID_TRANSACTION_TYPES = {"PURCHASE", "SALE", "RETURN_TO_SUPPLIER"}
VALID_TRANSACTION_STATUSES = {"PENDING", "PROCESSING", "COMPLETED", "CANCELED"}
TransactionType = Literal["PURCHASE", "SALE", "RETURN_TO_SUPPLIER"]
TransactionStatus = Literal["PENDING", "PROCESSING", "COMPLETED", "CANCELED"]


class Transaction(db.Model):
    """
    One row of the stock ledger.

    APPEND-MOSTLY: type, quantities, price and references are fixed at creation.
    Only status and updated_at change afterwards (via update_status).
    """
    __tablename__ = "transactions"
    __table_args__ = (
        db.Index("ix_transactions_created_at", "created_at"),
        db.Index("ix_transactions_product", "product_id"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)

    transaction_type = db.Column(db.String(32), nullable=False, index=True)
    status = db.Column(db.String(16), nullable=False, index=True)

    total_products = db.Column(db.Integer, nullable=False)
    total_price = db.Column(db.Numeric(14, 2), nullable=False)

    description = db.Column(db.String(500), nullable=True)

    product_id = db.Column(db.Integer, db.ForeignKey("products.id"), nullable=False)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    # Required for PURCHASE and RETURN_TO_SUPPLIER only
    supplier_id = db.Column(db.Integer, db.ForeignKey("suppliers.id"), nullable=True, index=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=True)

    product = db.relationship("Product", backref=db.backref("transactions", lazy=True))
    user = db.relationship(
        "User",
        backref=db.backref("transactions", lazy=True, order_by="Transaction.id.desc()"),
    )
    supplier = db.relationship("Supplier", backref=db.backref("transactions", lazy=True))

    def __repr__(self) -> str:
        return (
            f"<Transaction id={self.id} type={self.transaction_type} "
            f"status={self.status} qty={self.total_products}>"
        )

    def to_dict(
        self,
        *,
        include_product: bool = False,
        include_user: bool = False,
        include_supplier: bool = False,
    ) -> dict:
        """
        Explicit projection of a ledger row.

        Related entities are only embedded when asked for; an embedded user
        never carries its own transaction list.
        """
        data = {
            "id": self.id,
            "transactionType": self.transaction_type,
            "status": self.status,
            "totalProducts": self.total_products,
            "totalPrice": _money(self.total_price),
            "description": self.description,
            "productId": self.product_id,
            "userId": self.user_id,
            "supplierId": self.supplier_id,
            "createdAt": to_utc_z(self.created_at),
            "updatedAt": to_utc_z(self.updated_at),
        }
        if include_product:
            data["product"] = self.product.to_dict() if self.product else None
        if include_user:
            data["user"] = self.user.to_dict() if self.user else None
        if include_supplier:
            data["supplier"] = self.supplier.to_dict() if self.supplier else None
        return data
