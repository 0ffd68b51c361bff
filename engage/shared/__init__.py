"""Shared cross-cutting helpers (utilities and telemetry)."""
