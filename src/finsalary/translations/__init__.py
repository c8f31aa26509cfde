"""Shared JSON translation catalogues."""
