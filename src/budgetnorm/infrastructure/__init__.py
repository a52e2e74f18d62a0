"""Infrastructure layer: configuration, logging and collaborator implementations."""
