"""Outbound client for the payment processor."""

from checkout_gateway.processor.client import ProcessorClient

__all__ = ["ProcessorClient"]
