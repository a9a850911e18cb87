"""Application layer: DTOs, use cases and commands"""
