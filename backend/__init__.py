"""Sector Dashboard HTTP backend."""
