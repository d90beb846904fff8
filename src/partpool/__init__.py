"""Bounded-concurrency batch runner with retry of failed parts."""

__version__ = "0.1.0"
