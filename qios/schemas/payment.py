from decimal import Decimal
from typing import Any, List, Optional

from pydantic import Field

from qios.schemas.common import CamelModel


class CustomerDetails(CamelModel):
    first_name: str
    last_name: str = ""
    email: str = ""
    phone: str = ""

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class ItemDetail(CamelModel):
    id: str
    price: Decimal
    quantity: int = Field(gt=0)
    name: str


class PaymentRequest(CamelModel):
    order_id: str
    amount: Decimal = Field(gt=0)
    customer_details: CustomerDetails
    item_details: List[ItemDetail] = Field(min_length=1)


class PaymentCreate(PaymentRequest):
    gateway_type: str
    payment_method: Optional[str] = None


class PaymentVerify(CamelModel):
    gateway_type: str
    order_id: str
    payment_id: Optional[str] = None


class UtilityPaymentRequest(CamelModel):
    customer_id: str
    customer_name: str
    customer_phone: str = ""
    customer_email: str = ""
    amount: Decimal
    reference_number: str
    description: str = ""


class PaymentResult(CamelModel):
    """Normalized outcome of any vendor call; vendors never raise past the adapter."""

    success: bool
    data: Optional[Any] = None
    error: Optional[str] = None
    payment_url: Optional[str] = None
    virtual_account_number: Optional[str] = None
    qr_code: Optional[str] = None
    deep_link: Optional[str] = None
    token: Optional[str] = None
    status: Optional[str] = None
    payment_type: Optional[str] = None
    bill_amount: Optional[float] = None
    due_date: Optional[str] = None


class GatewayInfo(CamelModel):
    type: str
    name: str
    description: str
    supported_methods: List[str]
    logo: str
