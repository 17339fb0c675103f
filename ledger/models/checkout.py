# ledger/models/checkout.py

from datetime import datetime
from typing import Annotated, Literal, Union
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class CheckoutBook(BaseModel):
    """Book metadata shown alongside a checkout"""
    book_id: UUID
    title: str
    author: str
    isbn: str

    model_config = ConfigDict(from_attributes=True, frozen=True)


class CheckoutBase(BaseModel):
    checkout_id: UUID
    borrower_id: UUID
    checked_out_at: datetime
    book: CheckoutBook

    model_config = ConfigDict(frozen=True)

    @property
    def book_id(self) -> UUID:
        return self.book.book_id


class ActiveCheckout(CheckoutBase):
    """A loan that has not been returned yet"""
    status: Literal["active"] = "active"


class ArchivedCheckout(CheckoutBase):
    """A completed loan. Created once, when the active loan is returned."""
    status: Literal["returned"] = "returned"
    returned_at: datetime


Checkout = Annotated[Union[ActiveCheckout, ArchivedCheckout], Field(discriminator="status")]
