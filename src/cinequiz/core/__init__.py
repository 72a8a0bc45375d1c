"""Game engine core."""
