#!/usr/bin/env python3
"""
Example usage of the tmux session driver.

Launches a few agent sessions in parallel, checks and messages them, then
cleans up.
"""

import asyncio
from pathlib import Path

from overstory.tmux import (
    TmuxError,
    TmuxPidNotResolvedError,
    TmuxService,
)


async def launch_agents(service: TmuxService, names: list[str]) -> dict[str, int]:
    """Create one session per agent concurrently."""
    results = await asyncio.gather(
        *(
            service.create_session(name, Path.cwd(), "bash")
            for name in names
        ),
        return_exceptions=True,
    )

    pids = {}
    for name, result in zip(names, results, strict=True):
        if isinstance(result, TmuxPidNotResolvedError):
            # The session may exist anyway; reconcile by listing later
            print(f"✗ {name}: created but pid unknown")
        elif isinstance(result, TmuxError):
            print(f"✗ {name}: {result.message}")
        else:
            pids[name] = result
            print(f"✓ {name} running with pid {result}")
    return pids


async def main():
    service = TmuxService()
    names = ["overstory-example-a", "overstory-example-b"]

    await launch_agents(service, names)

    for session in await service.list_sessions():
        print(f"  {session.name}: {session.pid}")

    for name in names:
        if await service.is_session_alive(name):
            await service.send_keys(name, "echo hello from overstory")

    for name in names:
        try:
            await service.kill_session(name)
            print(f"✓ killed {name}")
        except TmuxError as e:
            print(f"✗ could not kill {e.agent_name}: {e.stderr}")


if __name__ == "__main__":
    asyncio.run(main())
