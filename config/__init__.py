"""Configuration for ReviewLens."""
