"""Web API for Listing Quality Scorer."""
