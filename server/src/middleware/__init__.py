"""Request middleware for the bloglist service."""
