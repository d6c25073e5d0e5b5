"""Application layer: DTOs, ports, services and use cases.

Depends on the domain only; infrastructure implements the ports.
"""
