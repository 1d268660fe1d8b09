"""Shopper-entered checkout details."""

from pydantic import BaseModel, Field

from shopping.checkout.port import PaymentMethod

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class CheckoutDetails(BaseModel):
    first_name: str = Field(min_length=2)
    last_name: str = Field(min_length=2)
    email: str = Field(pattern=EMAIL_PATTERN)
    phone: str = Field(min_length=10)
    address: str = Field(min_length=5)
    city: str = Field(min_length=2)
    state: str = Field(min_length=1)
    payment_method: PaymentMethod

    @property
    def shipping_address(self) -> str:
        return f"{self.address}, {self.city}, {self.state}"
