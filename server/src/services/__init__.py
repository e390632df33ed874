"""Service layer for the bloglist service."""
