"""Application services used by the command handler."""
