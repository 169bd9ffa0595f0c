"""HTTP clients for the aggregator and chain collaborators."""
