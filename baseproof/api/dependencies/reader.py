"""Reader dependency.

The reader is built once per application (see baseproof.api.main) and
kept on app.state; routes receive it through Depends.
"""

from fastapi import Request

from baseproof.application.services.proof_registry_reader import ProofRegistryReader
from baseproof.application.services.read_cache import reset_stale_flag


async def get_proof_registry_reader(request: Request) -> ProofRegistryReader:
    """Return the application's reader with the stale flag cleared.

    Async so the flag is reset in the same context the route runs in.
    """
    reset_stale_flag()
    return request.app.state.reader
