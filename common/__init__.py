"""Logging and console helpers shared by the command-line tools."""
