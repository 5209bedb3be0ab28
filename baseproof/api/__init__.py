"""HTTP API for the ProofRegistry read model."""
