"""Configuration, logging, errors and request plumbing."""
