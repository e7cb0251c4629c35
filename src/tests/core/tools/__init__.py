"""Tests for the tool registry."""
