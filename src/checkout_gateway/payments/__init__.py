"""Charging stored payment methods and looking up payments."""
