"""Configuration, constants, exceptions and time helpers."""
