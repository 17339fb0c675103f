# ledger/sa/models/user.py
import uuid
from sqlalchemy import String, Uuid
from sqlalchemy.orm import relationship, Mapped, mapped_column
from .base import Base, TimestampMixin


class User(Base, TimestampMixin):
    __tablename__ = 'users'

    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)

    # Relationships
    books = relationship('Book', back_populates='owner')
    checkouts = relationship('Checkout', back_populates='borrower')
