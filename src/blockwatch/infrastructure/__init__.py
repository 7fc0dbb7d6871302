"""Cross-cutting infrastructure: configuration access, logging, clock."""
