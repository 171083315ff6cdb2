"""Ambient concerns: configuration, extensions, logging and HTTP error translation."""
