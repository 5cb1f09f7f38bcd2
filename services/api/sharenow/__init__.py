"""Share Now API package."""
