"""Template rendering, filters and HTML post-processing."""
