"""Domain layer: entities and errors independent from the web and ORM layers."""
