"""
ccipwrite Payload Package
"""

from .codec import Payload, encode, encode_hex, decode
from .destination import (
    L2Destination,
    DatabaseDestination,
    Destination,
    parse_destination,
    default_destination
)
from .gateway import GatewayEntry, GatewayRequest, namehash, build_write_request

__all__ = [
    'Payload',
    'encode',
    'encode_hex',
    'decode',
    'L2Destination',
    'DatabaseDestination',
    'Destination',
    'parse_destination',
    'default_destination',
    'GatewayEntry',
    'GatewayRequest',
    'namehash',
    'build_write_request'
]
