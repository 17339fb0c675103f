from datetime import datetime, UTC
from typing import List, Optional, Union
from uuid import UUID, uuid4
import logging

from sqlalchemy import select, insert, delete, literal, Row
from sqlalchemy.orm import Session

from ledger.errors import NotFoundError, ConflictError
from ledger.models import ActiveCheckout, ArchivedCheckout, CheckoutBook
from ledger.sa.database import Database
from ledger.sa.models import Book, Checkout, ReturnedCheckout, UTCDateTime, ensure_utc

logger = logging.getLogger(__name__)


class CheckoutRepository:
    """Ledger of book checkouts.

    Writes run in a guarded transaction (``Database.serializable``) and
    re-check their preconditions inside it before mutating anything. Reads
    use short sessions at the default isolation level.
    """

    def __init__(self, db: Database):
        """Initialize the repository with the database it opens transactions on.

        Args:
            db: Connection and transaction manager shared by the application
        """
        self.db = db

    def check_out(self, book_id: UUID, user_id: UUID, checked_out_at: Optional[datetime] = None) -> UUID:
        """Lend a book to a user.

        Args:
            book_id: Book to check out
            user_id: Borrowing user
            checked_out_at: Time of the checkout, defaults to now

        Returns:
            The ID of the new checkout

        Raises:
            NotFoundError: The book does not exist
            ConflictError: The book is already checked out
            SerializationConflictError: A concurrent transaction won the race
            StorageFailure: The database failed
        """
        checked_out_at = ensure_utc(checked_out_at) if checked_out_at else datetime.now(UTC)

        with self.db.serializable() as session:
            state = self._lock_checkout_state(session, book_id)
            if state is None:
                raise NotFoundError(f"Book with id {book_id} not found")
            if state.checkout_id is not None:
                logger.warning("Book %s is already checked out (checkout %s)", book_id, state.checkout_id)
                raise ConflictError(f"Book with id {book_id} is already checked out")

            checkout_id = uuid4()
            result = session.execute(
                insert(Checkout.__table__).values(
                    checkout_id=checkout_id,
                    book_id=book_id,
                    user_id=user_id,
                    checked_out_at=checked_out_at
                )
            )
            if result.rowcount < 1:
                raise ConflictError("Failed to create checkout record")

        logger.info("Checked out book %s to user %s as checkout %s", book_id, user_id, checkout_id)
        return checkout_id

    def return_checkout(self, checkout_id: UUID, book_id: UUID, user_id: UUID,
                        returned_at: Optional[datetime] = None) -> None:
        """Return a checked out book, moving its checkout into the history.

        Args:
            checkout_id: The checkout being returned
            book_id: Book being returned
            user_id: User returning the book; must be the borrower
            returned_at: Time of the return, defaults to now

        Raises:
            NotFoundError: The book has no active checkout
            ConflictError: The active checkout is not the one described by the
                request, or the ledger changed underneath the transaction
            SerializationConflictError: A concurrent transaction won the race
            StorageFailure: The database failed
        """
        returned_at = ensure_utc(returned_at) if returned_at else datetime.now(UTC)

        with self.db.serializable() as session:
            state = self._lock_checkout_state(session, book_id)
            if state is None or state.checkout_id is None:
                raise NotFoundError(f"Book with id {book_id} has no active checkout")
            if (state.checkout_id, state.user_id) != (checkout_id, user_id):
                logger.warning(
                    "Return of checkout %s by user %s does not match active checkout %s of book %s",
                    checkout_id, user_id, state.checkout_id, book_id
                )
                raise ConflictError(
                    f"Specified checkout record is invalid: checkout_id={checkout_id}, "
                    f"book_id={book_id}, returned_by={user_id}"
                )
            if returned_at < state.checked_out_at:
                raise ConflictError(
                    f"Return time {returned_at.isoformat()} precedes checkout time "
                    f"{state.checked_out_at.isoformat()}"
                )

            archived = session.execute(
                insert(ReturnedCheckout.__table__).from_select(
                    ["checkout_id", "book_id", "user_id", "checked_out_at", "returned_at"],
                    select(
                        Checkout.checkout_id,
                        Checkout.book_id,
                        Checkout.user_id,
                        Checkout.checked_out_at,
                        literal(returned_at, UTCDateTime())
                    ).where(Checkout.checkout_id == checkout_id)
                )
            )
            if archived.rowcount < 1:
                raise ConflictError("Failed to create returned checkout record")

            removed = session.execute(
                delete(Checkout.__table__).where(
                    Checkout.checkout_id == checkout_id,
                    Checkout.book_id == book_id
                )
            )
            if removed.rowcount < 1:
                raise ConflictError("Failed to delete checkout record")

        logger.info("Returned checkout %s of book %s by user %s", checkout_id, book_id, user_id)

    def find_unreturned_by_book(self, book_id: UUID) -> Optional[ActiveCheckout]:
        """Get the active checkout of a book, if it is checked out."""
        with self.db.get_db() as session:
            return self._find_unreturned_by_book(session, book_id)

    def find_unreturned_by_user(self, user_id: UUID) -> List[ActiveCheckout]:
        """Get every book a user currently has, most recent checkout first."""
        stmt = (
            self._active_query()
            .where(Checkout.user_id == user_id)
            .order_by(Checkout.checked_out_at.desc())
        )
        with self.db.get_db() as session:
            return [self._to_active(checkout, book) for checkout, book in session.execute(stmt)]

    def find_unreturned_all(self) -> List[ActiveCheckout]:
        """Get every active checkout, most recent first."""
        stmt = self._active_query().order_by(Checkout.checked_out_at.desc())
        with self.db.get_db() as session:
            return [self._to_active(checkout, book) for checkout, book in session.execute(stmt)]

    def find_history(self, book_id: UUID) -> List[Union[ActiveCheckout, ArchivedCheckout]]:
        """Get the full loan history of a book.

        The active checkout, if any, comes first, followed by returned
        checkouts ordered by checkout time, most recent first. Both are read
        in one session.
        """
        stmt = (
            select(ReturnedCheckout, Book)
            .join(Book, Book.book_id == ReturnedCheckout.book_id)
            .where(ReturnedCheckout.book_id == book_id)
            .order_by(ReturnedCheckout.checked_out_at.desc())
        )
        with self.db.get_db() as session:
            current = self._find_unreturned_by_book(session, book_id)
            history: List[Union[ActiveCheckout, ArchivedCheckout]] = [
                self._to_archived(returned, book) for returned, book in session.execute(stmt)
            ]
        if current is not None:
            history.insert(0, current)
        return history

    def _lock_checkout_state(self, session: Session, book_id: UUID) -> Optional[Row]:
        """Read whether a book exists and its active checkout, inside the
        caller's transaction. Locks the book row on databases that support it.

        Returns:
            None if the book does not exist, otherwise a row whose checkout
            columns are None when the book is not checked out
        """
        stmt = (
            select(
                Book.book_id,
                Checkout.checkout_id,
                Checkout.user_id,
                Checkout.checked_out_at
            )
            .outerjoin(Checkout, Checkout.book_id == Book.book_id)
            .where(Book.book_id == book_id)
            .with_for_update(of=Book)
        )
        return session.execute(stmt).first()

    def _find_unreturned_by_book(self, session: Session, book_id: UUID) -> Optional[ActiveCheckout]:
        row = session.execute(self._active_query().where(Checkout.book_id == book_id)).first()
        if row is None:
            return None
        checkout, book = row
        return self._to_active(checkout, book)

    @staticmethod
    def _active_query():
        return select(Checkout, Book).join(Book, Book.book_id == Checkout.book_id)

    @staticmethod
    def _to_active(checkout: Checkout, book: Book) -> ActiveCheckout:
        return ActiveCheckout(
            checkout_id=checkout.checkout_id,
            borrower_id=checkout.user_id,
            checked_out_at=checkout.checked_out_at,
            book=CheckoutBook.model_validate(book)
        )

    @staticmethod
    def _to_archived(returned: ReturnedCheckout, book: Book) -> ArchivedCheckout:
        return ArchivedCheckout(
            checkout_id=returned.checkout_id,
            borrower_id=returned.user_id,
            checked_out_at=returned.checked_out_at,
            returned_at=returned.returned_at,
            book=CheckoutBook.model_validate(book)
        )
