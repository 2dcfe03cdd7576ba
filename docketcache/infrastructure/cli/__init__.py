"""Console adapters built on rich."""
