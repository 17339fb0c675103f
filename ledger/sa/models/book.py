# ledger/sa/models/book.py
import uuid
from sqlalchemy import String, ForeignKey, Index, Uuid
from sqlalchemy.orm import relationship, Mapped, mapped_column
from .base import Base, TimestampMixin


class Book(Base, TimestampMixin):
    """Catalog entry. The ledger only references books and reads their metadata."""
    __tablename__ = 'books'

    book_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    author: Mapped[str] = mapped_column(String(255), nullable=False)
    isbn: Mapped[str] = mapped_column(String(20), nullable=False)
    description: Mapped[str] = mapped_column(String, nullable=False, default='')
    user_id: Mapped[uuid.UUID] = mapped_column(ForeignKey('users.user_id'), nullable=False)

    # Relationships
    owner = relationship('User', back_populates='books')
    checkout = relationship('Checkout', back_populates='book', uselist=False)
    returned_checkouts = relationship('ReturnedCheckout', back_populates='book')

    __table_args__ = (
        Index('idx_books_isbn', 'isbn'),
        Index('idx_books_user_id', 'user_id'),
    )
