"""Version 1 of the API: movie and watchlist routes."""
