"""Core policy layer: literal constants and the validated policy table."""
