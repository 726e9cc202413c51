"""Domain layer: entities and exceptions shared by every other layer."""
