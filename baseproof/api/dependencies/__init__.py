"""API dependencies."""

from baseproof.api.dependencies.reader import get_proof_registry_reader

__all__: list[str] = ["get_proof_registry_reader"]
