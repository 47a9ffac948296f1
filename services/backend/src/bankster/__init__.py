"""Bankster - FinTS session lifecycle for unattended bank imports."""
