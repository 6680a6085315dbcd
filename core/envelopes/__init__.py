"""Envelope codecs for the supported inbound transports.

Each codec decodes its transport's payload into a ``RequestSpec`` and
encodes a ``ResponseSpec`` (or an error) back into that transport's shape.
"""

from .direct import DirectCodec
from .gateway import GatewayCodec

__all__ = ["DirectCodec", "GatewayCodec"]
