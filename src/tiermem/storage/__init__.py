"""Storage layer for tiermem."""

from tiermem.storage.profiles import CompanyProfileRepository, InMemoryCompanyProfileRepository

__all__ = ["CompanyProfileRepository", "InMemoryCompanyProfileRepository"]
