"""Core services: configuration, environment discovery, manifest and orchestration."""
