"""Explicit request actor passed into service operations."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ActorContext:
    id: int
    is_admin: bool = False
