"""Domain layer: record contracts, batch update pipeline and its outcome."""
