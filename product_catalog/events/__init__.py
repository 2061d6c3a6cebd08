"""Event channel and creation listener."""
