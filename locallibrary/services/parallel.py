"""
Local Library: Parallel Read Fan-Out
=====================================

What:  Runs a fixed group of independent reads concurrently and returns all
       results, or raises the first failure.
Why:   Detail pages and forms need a primary record plus dependents or
       reference lists; those queries do not depend on each other.
How:   asyncio.TaskGroup spawns one task per named reader. Each reader gets
       its own AsyncSession because a single session cannot run two
       statements at once. When any reader fails the group cancels the rest
       and the failing exception itself (not the ExceptionGroup) propagates,
       so global handlers see a plain NotFoundError or DatabaseError.

Usage:
    results = await fetch_parallel(
        sessions,
        book=lambda s: book_queries.get(s, book_id),
        copies=lambda s: copy_queries.for_book(s, book_id),
    )
    results["book"], results["copies"]
"""

import asyncio
from typing import Any, Awaitable, Callable, Dict

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

Reader = Callable[[AsyncSession], Awaitable[Any]]


async def _run(sessions: async_sessionmaker[AsyncSession], reader: Reader) -> Any:
    async with sessions() as session:
        return await reader(session)


async def fetch_parallel(
    sessions: async_sessionmaker[AsyncSession],
    **readers: Reader,
) -> Dict[str, Any]:
    """Run every reader concurrently; all succeed or the first error is raised."""
    try:
        async with asyncio.TaskGroup() as group:
            tasks = {
                name: group.create_task(_run(sessions, reader))
                for name, reader in readers.items()
            }
    except ExceptionGroup as failures:
        raise failures.exceptions[0]
    return {name: task.result() for name, task in tasks.items()}
