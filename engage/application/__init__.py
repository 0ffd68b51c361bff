"""Application layer: DTOs, interfaces, services, use cases.

Infrastructure implements the interfaces (email sender, webhook forwarder).
"""
