"""User interface entry points for persondir."""
