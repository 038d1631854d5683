"""Operator CLI for the Movie Leaks addon."""
