"""Shared value objects used across domains."""

from bankster.domain.shared.value_objects.secure_string import SecureString

__all__ = ["SecureString"]
