"""Infrastructure layer: persistence, audio probing, observability."""
