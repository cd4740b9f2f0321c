"""User configuration and save slot storage."""
