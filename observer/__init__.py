"""Observer: periodic observation reports published to Arweave."""

from __future__ import annotations

__all__: list[str] = []
