from typing import Optional
from uuid import UUID
from sqlalchemy import select, exists
from sqlalchemy.orm import Session, joinedload
from ledger.sa.models import Book


class BookRepository:
    """Read access to the book catalog."""

    def __init__(self, session: Session):
        """Initialize the repository with a database session.

        Args:
            session: SQLAlchemy session for database operations
        """
        self.session = session

    def get_by_id(self, book_id: UUID) -> Optional[Book]:
        """Get a book by its ID, with its owner and active checkout loaded.

        Args:
            book_id: The ID of the book to retrieve

        Returns:
            The Book object if found, None otherwise
        """
        stmt = (
            select(Book)
            .options(joinedload(Book.owner), joinedload(Book.checkout))
            .where(Book.book_id == book_id)
        )
        return self.session.execute(stmt).unique().scalar_one_or_none()

    def exists(self, book_id: UUID) -> bool:
        """Check whether a book is in the catalog.

        Runs on the repository's session, so inside a transaction it observes
        the same snapshot as the transaction's other reads.
        """
        return bool(self.session.scalar(select(exists().where(Book.book_id == book_id))))
