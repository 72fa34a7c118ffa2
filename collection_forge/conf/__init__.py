"""Settings modules for projects and tests using collection-forge."""
