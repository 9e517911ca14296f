import logging
from datetime import datetime, timedelta
from typing import Any, Optional

import httpx

from qios.core.config import settings
from qios.schemas.payment import PaymentResult

log = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


def expiry_iso(hours: int = 24) -> str:
    return (datetime.utcnow() + timedelta(hours=hours)).isoformat() + "Z"


def callback_url(path: str = "/payment/callback") -> str:
    return settings.app_url.rstrip("/") + path


def item_payload(items) -> list:
    return [
        {"id": i.id, "price": float(i.price), "quantity": i.quantity, "name": i.name}
        for i in items
    ]


def vendor_error(exc: Exception) -> str:
    """Best human-readable message out of a failed vendor call."""
    if isinstance(exc, httpx.HTTPStatusError):
        try:
            body = exc.response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            message = body.get("message") or body.get("error_message") or body.get("error")
            if message:
                return str(message)
        return f"HTTP {exc.response.status_code}"
    return str(exc) or exc.__class__.__name__


def failure(exc: Exception, gateway: str) -> PaymentResult:
    message = vendor_error(exc)
    log.warning("payment vendor failure: gateway=%s error=%s", gateway, message)
    return PaymentResult(success=False, error=message)


class RestGateway:
    """Bearer-token JSON gateway. Subclasses set `name` and `payment_type`."""

    name = "rest"
    payment_type: Optional[str] = None

    def __init__(self, config, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.config = config
        self.transport = transport

    def _auth(self) -> dict:
        return {"headers": {"Authorization": f"Bearer {self.config.api_key}"}}

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.config.base_url.rstrip("/"),
            timeout=DEFAULT_TIMEOUT,
            transport=self.transport,
            **self._auth(),
        )

    async def _post(self, path: str, payload: dict) -> Any:
        async with self._client() as client:
            response = await client.post(path, json=payload)
            response.raise_for_status()
            return response.json()

    async def _get(self, path: str) -> Any:
        async with self._client() as client:
            response = await client.get(path)
            response.raise_for_status()
            return response.json()

    async def verify_payment(self, reference: str) -> PaymentResult:
        try:
            data = await self._get(self.status_path(reference))
        except (httpx.HTTPError, ValueError) as e:
            return failure(e, self.name)

        return PaymentResult(
            success=True,
            data=data,
            status=data.get("status") if isinstance(data, dict) else None,
            payment_type=self.payment_type,
        )

    def status_path(self, reference: str) -> str:
        raise NotImplementedError
