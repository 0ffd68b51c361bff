"""Application DTOs (frozen dataclasses shared by services, repositories and routes)."""
