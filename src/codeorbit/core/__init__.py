"""Core graph vocabulary: value types, validation and the Result type."""
