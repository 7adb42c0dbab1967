"""Command line interface for inspecting settings resolution."""
