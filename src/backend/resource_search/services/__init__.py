"""Service layer: configuration, query understanding, AI collaborators and search."""
