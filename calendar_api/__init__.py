"""Calendar API package."""
