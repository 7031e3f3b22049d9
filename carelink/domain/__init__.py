"""Domain layer: entities and errors shared by every other layer."""
