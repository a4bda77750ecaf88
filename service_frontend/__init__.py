"""Frontend gateway for flag-edge."""
