"""Query handlers (reads)."""
