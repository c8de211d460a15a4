"""Exception types raised at the edges of the service.

Citation, search and lookup misses are reported as values, not exceptions;
these cover broken configuration, unknown tools and bad seed data.
"""
from __future__ import annotations


class FrLawError(RuntimeError):
    pass


class DatabaseNotFoundError(FrLawError):
    def __init__(self, path: str):
        super().__init__(f"Database file not found: {path}")
        self.path = path


class UnknownToolError(FrLawError):
    def __init__(self, name: str):
        super().__init__(f'Unknown tool "{name}"')
        self.name = name


class SeedValidationError(FrLawError):
    def __init__(self, source: str, detail: str):
        super().__init__(f"Invalid seed file {source}: {detail}")
        self.source = source
        self.detail = detail


__all__ = ['FrLawError', 'DatabaseNotFoundError', 'UnknownToolError', 'SeedValidationError']
