# ledger/sa/models/checkout.py
import uuid
from datetime import datetime
from sqlalchemy import ForeignKey, Index, Uuid, CheckConstraint
from sqlalchemy.orm import relationship, Mapped, mapped_column
from .base import Base, UTCDateTime


class Checkout(Base):
    """A loan that is currently outstanding. At most one row per book."""
    __tablename__ = 'checkouts'

    checkout_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True)
    book_id: Mapped[uuid.UUID] = mapped_column(ForeignKey('books.book_id'), nullable=False, unique=True)
    user_id: Mapped[uuid.UUID] = mapped_column(ForeignKey('users.user_id'), nullable=False)
    checked_out_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)

    # Relationships
    book = relationship('Book', back_populates='checkout')
    borrower = relationship('User', back_populates='checkouts')

    __table_args__ = (
        Index('idx_checkouts_user_id', 'user_id'),
    )


class ReturnedCheckout(Base):
    """Completed loan. Rows are only ever inserted."""
    __tablename__ = 'returned_checkouts'

    checkout_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True)
    book_id: Mapped[uuid.UUID] = mapped_column(ForeignKey('books.book_id'), nullable=False)
    user_id: Mapped[uuid.UUID] = mapped_column(ForeignKey('users.user_id'), nullable=False)
    checked_out_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
    returned_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)

    # Relationships
    book = relationship('Book', back_populates='returned_checkouts')

    __table_args__ = (
        CheckConstraint('returned_at >= checked_out_at', name='ck_returned_after_checkout'),
        Index('idx_returned_checkouts_book_id', 'book_id', 'checked_out_at'),
        Index('idx_returned_checkouts_user_id', 'user_id'),
    )
