"""Option store backends and filesystem abstraction."""
