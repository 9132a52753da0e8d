"""Fixtures shared by marklookup tests."""
