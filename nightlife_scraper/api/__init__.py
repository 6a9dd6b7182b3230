"""HTTP API for the scraper."""
