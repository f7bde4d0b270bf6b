"""RaceLog core: JSON record store, ownership-scoped repositories and cascades."""
