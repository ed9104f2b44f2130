import uuid
from datetime import datetime, timezone

from flask_login import UserMixin
from sqlalchemy.orm import validates

from subtrack import db
from subtrack.security.sanitizer import sanitize_email

ROLES = ("owner", "member", "admin")
DEFAULT_ROLE = "member"


def utcnow() -> datetime:
    """Naive UTC timestamp, the form stored in DateTime columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def new_account_id() -> str:
    return uuid.uuid4().hex


class Account(db.Model, UserMixin):
    __tablename__ = "accounts"

    id = db.Column(db.String(32), primary_key=True, default=new_account_id)
    name = db.Column(db.String(50), nullable=False)
    email = db.Column(db.String(254), unique=True, nullable=False, index=True)  # stored lower-case
    password_hash = db.Column(db.String(255), nullable=False)
    role = db.Column(db.String(20), nullable=False, default=DEFAULT_ROLE, index=True)
    email_verified = db.Column(db.Boolean, nullable=False, default=False)
    last_login_at = db.Column(db.DateTime, nullable=True, index=True)

    # --- Lockout counters, written only by AccountLockout ---
    login_attempts = db.Column(db.Integer, nullable=False, default=0)
    lock_until = db.Column(db.DateTime, nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow, index=True)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        # Rows written around the ORM must still be unique regardless of case
        db.Index("uq_accounts_email_lower", db.func.lower(email), unique=True),
    )

    # Plaintext waiting for prepare_for_persistence(); not a column
    _pending_password = None

    def __init__(self, **kwargs):
        kwargs.setdefault("id", new_account_id())
        kwargs.setdefault("role", DEFAULT_ROLE)
        kwargs.setdefault("email_verified", False)
        kwargs.setdefault("login_attempts", 0)
        super().__init__(**kwargs)

    @validates("email")
    def _normalize_email(self, key, value):
        # Every assignment, not just the constructor, stores the lower-case form
        return sanitize_email(value) if value is not None else None

    def __repr__(self) -> str:  # pragma: no cover
        return f"<Account {self.email} ({self.role})>"

    @property
    def password(self):
        raise AttributeError("password is write-only")

    @password.setter
    def password(self, plaintext: str):
        self._pending_password = plaintext

    @property
    def has_pending_password(self) -> bool:
        return self._pending_password is not None

    def take_pending_password(self) -> str | None:
        """Return the pending plaintext and forget it."""
        plaintext, self._pending_password = self._pending_password, None
        return plaintext

    @property
    def is_locked(self) -> bool:
        """True while ``lock_until`` is set and still in the future."""
        return self.lock_until is not None and self.lock_until > utcnow()

    @property
    def is_active(self) -> bool:
        # Flask-Login refuses inactive accounts
        return not self.is_locked

    def is_owner(self) -> bool:
        return self.role == "owner"

    def is_admin(self) -> bool:
        return self.role == "admin"

    def to_dict(self) -> dict:
        """Public representation; credentials and lockout counters are left out."""
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "role": self.role,
            "email_verified": self.email_verified,
            "last_login_at": self.last_login_at.isoformat() if self.last_login_at else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

    @classmethod
    def find_by_email(cls, email: str) -> "Account | None":
        """Case-insensitive lookup by email."""
        normalized = sanitize_email(email)
        if not normalized:
            return None
        return cls.query.filter(db.func.lower(cls.email) == normalized).first()

    @classmethod
    def find_active(cls):
        """Query for accounts without a live lock."""
        return cls.query.filter(
            db.or_(cls.lock_until.is_(None), cls.lock_until <= utcnow())
        )
