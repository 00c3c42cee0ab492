"""Checkout gateway between a merchant web app and the Primer hosted checkout."""

__version__ = "2.1.0"
