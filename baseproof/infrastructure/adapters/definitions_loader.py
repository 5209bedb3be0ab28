"""Proof definitions YAML loader.

Document shape:

    proofs:
      - type: BASE_CONTRACT_DEPLOYER
        name: Contract Deployer
        description: ...
        verification_method: ...
        source_of_truth: ...
        metadata_fields: [contract_address, deployment_tx_hash]
"""

from __future__ import annotations

from pathlib import Path

import structlog
import yaml

from baseproof.domain.models.proof_definition import ProofDefinition

logger = structlog.get_logger(__name__)


class DefinitionsError(ValueError):
    """Raised when the definitions document cannot be parsed."""


def parse_proof_definitions(text: str, source: str = "<string>") -> list[ProofDefinition]:
    """Parse a definitions document.

    Args:
        text: YAML text.
        source: Name used in error messages.

    Returns:
        Definitions in document order.

    Raises:
        DefinitionsError: If the YAML is invalid or an entry is malformed.
    """
    try:
        document = yaml.safe_load(text) or {}
    except yaml.YAMLError as exc:
        raise DefinitionsError(f"{source}: invalid YAML: {exc}") from exc

    if not isinstance(document, dict):
        raise DefinitionsError(f"{source}: top level must be a mapping")

    entries = document.get("proofs") or []
    if not isinstance(entries, list):
        raise DefinitionsError(f"{source}: 'proofs' must be a list")

    definitions: list[ProofDefinition] = []
    for index, entry in enumerate(entries):
        try:
            definitions.append(ProofDefinition.from_dict(entry))
        except ValueError as exc:
            raise DefinitionsError(f"{source}: proofs[{index}]: {exc}") from exc
    return definitions


def load_proof_definitions(path: str | Path) -> list[ProofDefinition]:
    """Load definitions from a YAML file.

    Raises:
        FileNotFoundError: If path does not exist.
        DefinitionsError: If the document is malformed.
    """
    path = Path(path)
    definitions = parse_proof_definitions(path.read_text(encoding="utf-8"), source=str(path))
    logger.info("proof_definitions_loaded", path=str(path), count=len(definitions))
    return definitions
