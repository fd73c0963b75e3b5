"""Map entities and geometry."""
