"""Reactive graph store and persisted appearance settings."""
