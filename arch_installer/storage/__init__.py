"""Target disk handling: discovery, partitioning, formatting and mounting."""
