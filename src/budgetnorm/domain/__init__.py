"""Domain layer: models, ports and pure services."""
