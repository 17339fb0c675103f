import click
from datetime import datetime
from typing import Optional, Union
from uuid import UUID
from ledger.errors import LedgerError
from ledger.models import ActiveCheckout, ArchivedCheckout
from ledger.sa.database import Database
from ledger.sa.repositories import BookRepository, CheckoutRepository
from ledger.services import retry_on_conflict


def format_checkout(entry: Union[ActiveCheckout, ArchivedCheckout]) -> str:
    """Render a checkout as a single line of text."""
    line = (
        f"{entry.checkout_id}  {entry.book.title} by {entry.book.author} (ISBN {entry.book.isbn})  "
        f"borrower={entry.borrower_id}  out={entry.checked_out_at.isoformat()}"
    )
    if isinstance(entry, ArchivedCheckout):
        line += f"  returned={entry.returned_at.isoformat()}"
    else:
        line += "  [active]"
    return line


@click.group()
def checkout():
    """Check books out and back in"""
    pass


@checkout.command(name='out')
@click.argument('book_id', type=click.UUID)
@click.argument('user_id', type=click.UUID)
@click.option('--at', 'checked_out_at', type=click.DateTime(), default=None,
              help='Checkout time in UTC (defaults to now)')
@click.option('--retries', default=3, type=click.IntRange(min=1), show_default=True,
              help='Attempts when a concurrent request wins the race')
@click.pass_obj
def check_out(database: Database, book_id: UUID, user_id: UUID, checked_out_at: Optional[datetime], retries: int):
    """Check out BOOK_ID to USER_ID"""
    repo = CheckoutRepository(database)
    try:
        checkout_id = retry_on_conflict(lambda: repo.check_out(book_id, user_id, checked_out_at), retries=retries)
    except LedgerError as e:
        raise click.ClickException(str(e))
    click.echo(str(checkout_id))


@checkout.command(name='return')
@click.argument('checkout_id', type=click.UUID)
@click.argument('book_id', type=click.UUID)
@click.argument('user_id', type=click.UUID)
@click.option('--at', 'returned_at', type=click.DateTime(), default=None,
              help='Return time in UTC (defaults to now)')
@click.option('--retries', default=3, type=click.IntRange(min=1), show_default=True,
              help='Attempts when a concurrent request wins the race')
@click.pass_obj
def return_checkout(database: Database, checkout_id: UUID, book_id: UUID, user_id: UUID,
                    returned_at: Optional[datetime], retries: int):
    """Return BOOK_ID, closing CHECKOUT_ID held by USER_ID"""
    repo = CheckoutRepository(database)
    try:
        retry_on_conflict(lambda: repo.return_checkout(checkout_id, book_id, user_id, returned_at), retries=retries)
    except LedgerError as e:
        raise click.ClickException(str(e))
    click.echo(f"Returned {checkout_id}")


@checkout.command(name='list')
@click.option('--user', 'user_id', type=click.UUID, default=None, help='Only show books held by this user')
@click.pass_obj
def list_unreturned(database: Database, user_id: Optional[UUID]):
    """List books that are currently checked out"""
    repo = CheckoutRepository(database)
    try:
        entries = repo.find_unreturned_by_user(user_id) if user_id else repo.find_unreturned_all()
    except LedgerError as e:
        raise click.ClickException(str(e))

    if not entries:
        click.echo("No books are checked out")
        return
    for entry in entries:
        click.echo(format_checkout(entry))


@checkout.command()
@click.argument('book_id', type=click.UUID)
@click.pass_obj
def history(database: Database, book_id: UUID):
    """Show the loan history of BOOK_ID, current loan first"""
    try:
        with database.get_db() as session:
            if not BookRepository(session).exists(book_id):
                raise click.ClickException(f"Book with id {book_id} not found")
        entries = CheckoutRepository(database).find_history(book_id)
    except LedgerError as e:
        raise click.ClickException(str(e))

    if not entries:
        click.echo("No checkouts recorded")
        return
    for entry in entries:
        click.echo(format_checkout(entry))
