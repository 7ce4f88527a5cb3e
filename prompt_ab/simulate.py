#!/usr/bin/env python3
"""
Session Traffic Simulator for the prompt A/B test service.

Drives synthetic sessions through the hooks and reports how they were split
across variants, so operators can sanity-check weights before rollout.

Offline mode (default) runs a local plugin in-process.
Live mode (--url) POSTs before_prompt_build then agent_end per session to a
running service, which also exercises its log pipeline.
Live mode reports totals only; per-variant splits are available offline.
"""
import argparse
import asyncio
import sys
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import httpx

from prompt_ab.config import Config
from prompt_ab.hooks import PromptAbTestPlugin, register
from prompt_ab.models import PromptBuildContext


@dataclass
class SimulationStats:
    """Statistics for a simulation run"""
    sessions: int = 0
    modified: int = 0
    failed: int = 0
    # experiment id -> variant id -> sessions
    variant_counts: Dict[str, Dict[str, int]] = field(
        default_factory=lambda: defaultdict(lambda: defaultdict(int))
    )

    @property
    def modified_rate(self) -> float:
        """Share of sessions that received any overlay"""
        if self.sessions == 0:
            return 0.0
        return self.modified / self.sessions

    def ratio(self, experiment_id: str, variant_id: str) -> float:
        """Share of an experiment's sessions assigned to a variant"""
        counts = self.variant_counts.get(experiment_id, {})
        total = sum(counts.values())
        if total == 0:
            return 0.0
        return counts.get(variant_id, 0) / total

    def summary_lines(self) -> List[str]:
        lines = [
            f"Sessions: {self.sessions}  modified: {self.modified} ({self.modified_rate:.1%})"
            + (f"  failed: {self.failed}" if self.failed else "")
        ]
        for experiment_id, counts in self.variant_counts.items():
            lines.append(f"  {experiment_id}")
            for variant_id, count in counts.items():
                lines.append(
                    f"    {variant_id:<24} {count:>8}  {self.ratio(experiment_id, variant_id):6.1%}"
                )
        return lines


def simulate_offline(
    plugin: PromptAbTestPlugin,
    sessions: int,
    prefix: str = "sim-session",
    agent_id: Optional[str] = None,
) -> SimulationStats:
    """
    Run synthetic sessions through a local plugin.

    Args:
        plugin: Active plugin
        sessions: Number of distinct sessions
        prefix: Session key prefix
        agent_id: Agent sent with every request (affects agentIds filters)
    """
    stats = SimulationStats()
    for i in range(sessions):
        session_key = f"{prefix}-{i}"
        overlay = plugin.before_prompt_build(
            PromptBuildContext(session_key=session_key, agent_id=agent_id)
        )
        stats.sessions += 1
        if overlay is not None:
            stats.modified += 1

        for experiment in plugin.experiments:
            variant = plugin.store.lookup(session_key, experiment.id)
            if variant is not None:
                stats.variant_counts[experiment.id][variant.id] += 1
    return stats


async def simulate_live(
    base_url: str,
    sessions: int,
    prefix: str = "sim-session",
    agent_id: Optional[str] = None,
    concurrency: int = 8,
    client: Optional[httpx.AsyncClient] = None,
) -> SimulationStats:
    """Run synthetic sessions against a running service."""
    stats = SimulationStats()
    semaphore = asyncio.Semaphore(concurrency)
    owns_client = client is None
    client = client or httpx.AsyncClient(base_url=base_url, timeout=10.0)

    async def run_session(i: int):
        session_key = f"{prefix}-{i}"
        context: Dict[str, Any] = {"sessionKey": session_key}
        if agent_id:
            context["agentId"] = agent_id
        async with semaphore:
            try:
                response = await client.post("/hooks/before_prompt_build", json=context)
                response.raise_for_status()
                end = await client.post("/hooks/agent_end", json={"sessionKey": session_key})
                end.raise_for_status()
            except httpx.HTTPError as e:
                stats.failed += 1
                print(f"✗ {session_key}: {e}", file=sys.stderr)
                return
        stats.sessions += 1
        if response.json().get("modified"):
            stats.modified += 1

    try:
        await asyncio.gather(*(run_session(i) for i in range(sessions)))
    finally:
        if owns_client:
            await client.aclose()
    return stats


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point"""
    parser = argparse.ArgumentParser(
        description="Session Traffic Simulator for the prompt A/B test service"
    )
    parser.add_argument(
        "--config",
        help="Experiment config JSON file (default: PROMPT_AB_CONFIG_PATH / PROMPT_AB_CONFIG_JSON)"
    )
    parser.add_argument(
        "--sessions",
        type=int,
        default=1000,
        help="Number of synthetic sessions (default: 1000)"
    )
    parser.add_argument(
        "--prefix",
        default="sim-session",
        help="Session key prefix (default: sim-session)"
    )
    parser.add_argument(
        "--agent-id",
        help="Agent id sent with each prompt-build request"
    )
    parser.add_argument(
        "--url",
        help="Base URL of a running service; switches to live mode"
    )
    parser.add_argument(
        "--concurrency",
        type=int,
        default=8,
        help="Concurrent sessions in live mode (default: 8)"
    )

    args = parser.parse_args(argv)

    if args.url:
        stats = asyncio.run(
            simulate_live(args.url, args.sessions, args.prefix, args.agent_id, args.concurrency)
        )
        print("\n".join(stats.summary_lines()))
        return 0 if stats.failed == 0 else 1

    raw_config = Config.load_plugin_config(inline="", path=args.config) if args.config else Config.load_plugin_config()
    plugin = register(raw_config)
    if plugin is None:
        print("No active experiments configured; nothing to simulate.", file=sys.stderr)
        return 1

    stats = simulate_offline(plugin, args.sessions, args.prefix, args.agent_id)
    print("\n".join(stats.summary_lines()))
    return 0


if __name__ == "__main__":
    sys.exit(main())
