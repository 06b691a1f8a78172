"""Domain core: models, parsing, aggregation and encoding."""
