"""Post storage and routes."""
