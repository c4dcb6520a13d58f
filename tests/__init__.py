"""Tests for Nancymon."""
