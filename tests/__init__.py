"""Tests for the films service."""
