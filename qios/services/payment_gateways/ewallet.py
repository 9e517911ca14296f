import httpx

from qios.schemas.payment import PaymentRequest, PaymentResult
from qios.services.payment_gateways.base import RestGateway, callback_url, failure, item_payload


class EWalletGateway(RestGateway):
    """Direct e-wallet merchant API; the config shape is shared with the banks."""

    async def create_payment(self, request: PaymentRequest) -> PaymentResult:
        details = request.customer_details
        payload = {
            "merchantId": self.config.merchant_id,
            "orderId": request.order_id,
            "amount": float(request.amount),
            "customerName": details.full_name,
            "customerEmail": details.email,
            "customerPhone": details.phone,
            "items": item_payload(request.item_details),
            "callbackUrl": callback_url(),
            "redirectUrl": callback_url("/payment/success"),
        }
        try:
            data = await self._post("/payment/create", payload)
        except (httpx.HTTPError, ValueError) as e:
            return failure(e, self.name)

        return PaymentResult(
            success=True,
            data=data,
            payment_url=data.get("paymentUrl"),
            deep_link=data.get("deepLink"),
        )

    def status_path(self, reference: str) -> str:
        return f"/payment/status/{reference}"


class DANAGateway(EWalletGateway):
    name = "dana"
    payment_type = "DANA"


class OVOGateway(EWalletGateway):
    name = "ovo"
    payment_type = "OVO"


class LinkAjaGateway(EWalletGateway):
    name = "linkaja"
    payment_type = "LINKAJA"


class GoPayGateway(EWalletGateway):
    name = "gopay"
    payment_type = "GOPAY"
