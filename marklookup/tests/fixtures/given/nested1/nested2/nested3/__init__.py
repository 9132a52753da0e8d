"""Not marked."""
