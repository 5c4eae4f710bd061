"""Object models used by the factory tests."""
