"""Movie Leaks Stremio addon backend."""
