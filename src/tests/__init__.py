"""Test suite for llmgraph."""
