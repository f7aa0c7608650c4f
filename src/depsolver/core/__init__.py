"""Core data types and algorithms: semantic versions and dependency graphs."""
