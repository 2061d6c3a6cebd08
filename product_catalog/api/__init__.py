"""HTTP boundary for the product catalog."""
