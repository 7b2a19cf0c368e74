"""Core utilities: process execution, scratch space, storage and errors."""
