"""Clients, service catalogue and price quotes for an events & wedding-decor studio."""

__version__ = "0.1.0"
