# tests/test_sa/conftest.py
import pytest
from sqlalchemy import func, select
from sqlalchemy.sql import text
from sqlalchemy.orm import Session

from ledger.sa.database import Database
from ledger.sa.models import Book, User
from ledger.sa.repositories import CheckoutRepository


@pytest.fixture(scope="session")
def test_db_path(tmp_path_factory):
    """Create a temporary directory for the test database."""
    test_dir = tmp_path_factory.mktemp("test_db")
    return str(test_dir / "test_ledger.db")


@pytest.fixture(scope="session")
def database(test_db_path):
    """Create a file-backed test database so several connections can share it"""
    db = Database(f"sqlite:///{test_db_path}")

    # Drop all tables and recreate schema
    db.drop_db()
    db.init_db()

    yield db

    db.dispose()


@pytest.fixture(scope="function")
def db_session(database):
    """Create a new database session for a test"""
    session: Session = database.get_session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(autouse=True)
def cleanup_db(db_session):
    """Clean up database tables before each test"""
    # Delete all data from tables in reverse order of dependencies
    db_session.execute(text("DELETE FROM returned_checkouts"))
    db_session.execute(text("DELETE FROM checkouts"))
    db_session.execute(text("DELETE FROM books"))
    db_session.execute(text("DELETE FROM users"))
    db_session.commit()
    yield
    # Clean up after test as well
    db_session.rollback()


@pytest.fixture
def checkout_repo(database):
    """Fixture to create a CheckoutRepository instance."""
    return CheckoutRepository(database)


@pytest.fixture
def count_rows(database):
    """Count rows of a model in a fresh session, so the count sees every commit"""
    def _count(model) -> int:
        with database.get_db() as session:
            return session.scalar(select(func.count()).select_from(model))
    return _count


@pytest.fixture
def sample_user(db_session):
    """Create a sample user for testing."""
    user = User(name="Test User", email="test@example.com")
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture
def other_user(db_session):
    """Create a second user for testing."""
    user = User(name="Other User", email="other@example.com")
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture
def multiple_users(db_session):
    """Create several users for concurrency tests."""
    users = [User(name=f"Test User {i}", email=f"user{i}@example.com") for i in range(8)]
    db_session.add_all(users)
    db_session.commit()
    return users


@pytest.fixture
def sample_book(db_session, sample_user):
    """Create a sample book owned by the sample user."""
    book = Book(
        title="The Rust Programming Language",
        author="Steve Klabnik and Carol Nichols",
        isbn="9781593278281",
        description="Test book description",
        user_id=sample_user.user_id
    )
    db_session.add(book)
    db_session.commit()
    return book


@pytest.fixture
def multiple_books(db_session, sample_user):
    """Create multiple books for testing."""
    books = []
    for i in range(1, 6):
        book = Book(
            title=f"Test Book {i}",
            author=f"Test Author {i}",
            isbn=f"978000000000{i}",
            user_id=sample_user.user_id
        )
        db_session.add(book)
        books.append(book)
    db_session.commit()
    return books
