"""Shared test fixtures for the Merkle vault tests."""
