"""Base node abstraction."""
