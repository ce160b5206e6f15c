"""Pydantic contracts for request bodies, stored report payloads, and responses."""
