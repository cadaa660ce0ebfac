"""Domain core: models, repositories, schemas and services."""
