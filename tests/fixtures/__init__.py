"""Shared test fixtures for steamcmdkit."""
