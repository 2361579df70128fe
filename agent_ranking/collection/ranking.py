"""
Ranking of agents by aggregated listing volume.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from agent_ranking.domain.listings import RankedEntry


def rank_agents(counts: Mapping[str, int]) -> list[RankedEntry]:
    """
    Sort agents by listing count descending, then by name ascending.
    """

    ordered = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    return [RankedEntry(agent_name=name, count=count) for name, count in ordered]


def top_agents(entries: Sequence[RankedEntry], k: int) -> list[RankedEntry]:
    if k < 0:
        raise ValueError("k must be non-negative.")
    return list(entries[:k])
