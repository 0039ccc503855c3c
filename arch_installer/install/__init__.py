"""Installation phases that act on the mounted target system."""
