import logging
from typing import Dict, List, Optional

import httpx
from pydantic import BaseModel

from qios.core.config import Settings
from qios.schemas.payment import GatewayInfo
from qios.services.payment_gateways.bank import BankConfig, BCAGateway, MandiriGateway
from qios.services.payment_gateways.ewallet import DANAGateway, GoPayGateway, LinkAjaGateway, OVOGateway
from qios.services.payment_gateways.midtrans import MidtransConfig, MidtransGateway
from qios.services.payment_gateways.utility import PDAMGateway, PLNGateway, UtilityConfig
from qios.services.payment_gateways.xendit import XenditConfig, XenditGateway

log = logging.getLogger(__name__)


class PaymentGatewayConfig(BaseModel):
    """A gateway is available only when its section is present."""

    midtrans: Optional[MidtransConfig] = None
    xendit: Optional[XenditConfig] = None
    bca: Optional[BankConfig] = None
    mandiri: Optional[BankConfig] = None
    dana: Optional[BankConfig] = None
    ovo: Optional[BankConfig] = None
    linkaja: Optional[BankConfig] = None
    gopay: Optional[BankConfig] = None
    pln: Optional[UtilityConfig] = None
    pdam: Optional[UtilityConfig] = None


# name -> (gateway class, display name used in errors)
REGISTRY = {
    "midtrans": (MidtransGateway, "Midtrans"),
    "xendit": (XenditGateway, "Xendit"),
    "bca": (BCAGateway, "BCA"),
    "mandiri": (MandiriGateway, "Mandiri"),
    "dana": (DANAGateway, "DANA"),
    "ovo": (OVOGateway, "OVO"),
    "linkaja": (LinkAjaGateway, "LinkAja"),
    "gopay": (GoPayGateway, "GoPay"),
    "pln": (PLNGateway, "PLN"),
    "pdam": (PDAMGateway, "PDAM"),
}

GATEWAY_INFO: Dict[str, dict] = {
    "midtrans": {
        "name": "Midtrans",
        "description": "Multi-payment gateway with bank transfer and e-wallet support",
        "supported_methods": ["bank_transfer", "gopay", "shopeepay", "dana", "ovo", "linkaja"],
        "logo": "/logos/midtrans.png",
    },
    "xendit": {
        "name": "Xendit",
        "description": "Payment infrastructure with virtual accounts and QRIS",
        "supported_methods": ["virtual_account", "qris", "OVO", "DANA", "LINKAJA", "SHOPEEPAY"],
        "logo": "/logos/xendit.png",
    },
    "bca": {
        "name": "BCA",
        "description": "Bank Central Asia virtual account",
        "supported_methods": ["virtual_account"],
        "logo": "/logos/bca.png",
    },
    "mandiri": {
        "name": "Mandiri",
        "description": "Bank Mandiri virtual account",
        "supported_methods": ["virtual_account"],
        "logo": "/logos/mandiri.png",
    },
    "dana": {
        "name": "DANA",
        "description": "DANA e-wallet payment",
        "supported_methods": ["ewallet"],
        "logo": "/logos/dana.png",
    },
    "ovo": {
        "name": "OVO",
        "description": "OVO e-wallet payment",
        "supported_methods": ["ewallet"],
        "logo": "/logos/ovo.png",
    },
    "linkaja": {
        "name": "LinkAja",
        "description": "LinkAja e-wallet payment",
        "supported_methods": ["ewallet"],
        "logo": "/logos/linkaja.png",
    },
    "gopay": {
        "name": "GoPay",
        "description": "GoPay e-wallet payment",
        "supported_methods": ["ewallet"],
        "logo": "/logos/gopay.png",
    },
    "pln": {
        "name": "PLN",
        "description": "PLN electricity bill payment",
        "supported_methods": ["utility"],
        "logo": "/logos/pln.png",
    },
    "pdam": {
        "name": "PDAM",
        "description": "PDAM water bill payment",
        "supported_methods": ["utility"],
        "logo": "/logos/pdam.png",
    },
}


def config_from_settings(s: Settings) -> PaymentGatewayConfig:
    config = PaymentGatewayConfig()

    if s.midtrans_server_key:
        config.midtrans = MidtransConfig(
            server_key=s.midtrans_server_key,
            client_key=s.midtrans_client_key,
            is_production=s.midtrans_is_production,
        )
    if s.xendit_secret_key:
        config.xendit = XenditConfig(
            secret_key=s.xendit_secret_key,
            public_key=s.xendit_public_key,
            base_url=s.xendit_base_url,
        )

    for name in ("bca", "mandiri", "dana", "ovo", "linkaja", "gopay"):
        api_key = getattr(s, f"{name}_api_key")
        if api_key:
            setattr(config, name, BankConfig(
                api_key=api_key,
                base_url=getattr(s, f"{name}_base_url"),
                merchant_id=getattr(s, f"{name}_merchant_id") or "",
            ))

    for name in ("pln", "pdam"):
        api_key = getattr(s, f"{name}_api_key")
        if api_key:
            setattr(config, name, UtilityConfig(api_key=api_key, base_url=getattr(s, f"{name}_base_url")))

    return config


class PaymentGatewayFactory:
    def __init__(self, config: PaymentGatewayConfig, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.config = config
        self.transport = transport

    def get_gateway(self, name: str):
        if name not in REGISTRY:
            raise ValueError(f"Unsupported payment gateway: {name}")

        gateway_cls, label = REGISTRY[name]
        section = getattr(self.config, name)
        if section is None:
            raise ValueError(f"{label} config not provided")

        if gateway_cls is MidtransGateway:
            return MidtransGateway(section)
        return gateway_cls(section, transport=self.transport)

    def get_available_gateways(self) -> List[str]:
        return [name for name in REGISTRY if getattr(self.config, name) is not None]

    def describe_available(self) -> List[GatewayInfo]:
        return [GatewayInfo(type=name, **GATEWAY_INFO[name]) for name in self.get_available_gateways()]
