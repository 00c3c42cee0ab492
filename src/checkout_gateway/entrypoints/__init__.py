"""Deployment adapters sharing one set of routers."""
