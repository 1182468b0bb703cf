"""MongoDB infrastructure."""
