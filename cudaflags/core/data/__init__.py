"""Static hardware data."""
