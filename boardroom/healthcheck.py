"""Provider health checks: probe every registered provider in parallel."""

import asyncio
import logging

from boardroom.providers.base import ProviderBinding

logger = logging.getLogger(__name__)

_TIMEOUT_SEC = 15.0


async def _check_one(name: str, provider: ProviderBinding) -> tuple[str, bool, str]:
    """Probe a single provider. Returns (name, ok, error_message)."""
    try:
        ok = await asyncio.wait_for(provider.health_check(), timeout=_TIMEOUT_SEC)
    except TimeoutError:
        return name, False, f"timed out after {_TIMEOUT_SEC}s"
    except Exception as exc:
        return name, False, str(exc)
    return name, ok, "" if ok else "health probe failed"


async def run_health_checks(
    providers: dict[str, ProviderBinding],
) -> dict[str, tuple[bool, str]]:
    """Probe all providers in parallel.

    Returns:
        Dict mapping provider name -> (ok, error_message).
        error_message is "" when ok is True.
    """
    results = await asyncio.gather(*(_check_one(n, p) for n, p in providers.items()))
    for name, ok, err in results:
        logger.debug("Health check %s: %s %s", name, "ok" if ok else "FAIL", err)
    return {name: (ok, err) for name, ok, err in results}
