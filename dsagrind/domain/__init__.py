"""Domain layer: entities, events, errors and ports. No framework imports."""
