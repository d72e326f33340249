"""Plant equipment components."""
