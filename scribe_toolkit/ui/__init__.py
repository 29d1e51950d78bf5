"""Front-end facing layer: controllers only, no widget toolkit."""
