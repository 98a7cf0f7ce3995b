"""Product catalog: models, listing query builder, store and REST endpoints."""
