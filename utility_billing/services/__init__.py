"""Services: database-backed operations used by the API routes."""
