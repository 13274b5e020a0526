"""Backend adapters for persondir."""
