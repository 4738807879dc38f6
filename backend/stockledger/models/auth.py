from __future__ import annotations

from typing import Literal

from ..extensions import db
from stockledger.time_utils import to_utc_z, utcnow


VALID_ROLES = {"ADMIN", "MANAGER"}
UserRole = Literal["ADMIN", "MANAGER"]


class User(db.Model):
    """
    User accounts for authentication and attribution.

    The email is the login identity and the bearer-token subject.
    Every ledger row points at the user who caused it.
    """
    __tablename__ = "users"
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column(db.Integer, primary_key=True)

    name = db.Column(db.String(120), nullable=False)
    email = db.Column(db.String(255), nullable=False, unique=True, index=True)

    # Bcrypt hashed password
    password_hash = db.Column(db.String(255), nullable=False)

    phone_number = db.Column(db.String(32), nullable=False)
    role = db.Column(db.String(16), nullable=False, default="MANAGER")

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email!r} role={self.role}>"

    @property
    def is_admin(self) -> bool:
        return self.role == "ADMIN"

    def to_dict(self, *, include_transactions: bool = False) -> dict:
        # password_hash is never serialized
        data = {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "phoneNumber": self.phone_number,
            "role": self.role,
            "createdAt": to_utc_z(self.created_at),
        }
        if include_transactions:
            # Nested rows drop their own user/supplier to keep the graph finite
            data["transactions"] = [
                t.to_dict(include_product=True)
                for t in self.transactions
            ]
        return data
