"""Data transfer objects of the application layer."""
