"""
SMS Gateways
============
Vendor clients used to deliver one-time codes.
"""

from .base import SMSGateway, GatewayResponse
from .spryng import SpryngGateway, SpryngMessage

__all__ = [
    "SMSGateway",
    "GatewayResponse",
    "SpryngGateway",
    "SpryngMessage",
]
