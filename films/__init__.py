"""Sakila films catalog service."""
