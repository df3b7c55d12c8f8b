"""Stateful models: layer cakes, the feature store and configuration."""
