"""Integration clients: `real_http` for the live systems, `mocks` for development and tests."""
