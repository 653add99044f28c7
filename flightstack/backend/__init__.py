"""Proxy relay backend."""
