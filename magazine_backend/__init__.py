"""Magazine archive backend package."""
