"""Shared utilities: logging setup and text helpers."""
