"""Validation and text helpers."""
