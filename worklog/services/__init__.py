"""Domain services used by the API views."""
