"""Venue catalog: bookable halls and their operating hours."""
