"""Proof type definitions read from the external definitions document.

The definitions document is owned by the issuing side. Here it is only
used to learn type names so their hashes can be reverse-mapped.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ProofDefinition:
    """Metadata for one proof type.

    Attributes:
        type: Proof type identifier (the string that gets hashed).
        name: Human-readable name.
        description: What holding the proof attests.
        verification_method: How the issuer checks the condition.
        source_of_truth: Where the underlying fact lives.
        metadata_fields: Keys expected in the off-chain metadata.
    """

    type: str
    name: str = ""
    description: str = ""
    verification_method: str = ""
    source_of_truth: str = ""
    metadata_fields: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if not self.type or not self.type.strip():
            raise ValueError("proof definition requires a non-empty type")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ProofDefinition:
        """Create from one entry of the YAML document."""
        if not isinstance(data, dict):
            raise ValueError(f"proof definition must be a mapping, got {type(data).__name__}")
        fields = data.get("metadata_fields") or []
        return cls(
            type=str(data.get("type", "")).strip(),
            name=str(data.get("name", "")),
            description=str(data.get("description", "")),
            verification_method=str(data.get("verification_method", "")),
            source_of_truth=str(data.get("source_of_truth", "")),
            metadata_fields=tuple(str(f) for f in fields),
        )
