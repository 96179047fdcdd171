"""Model collaborators."""
