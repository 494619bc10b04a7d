"""
Agent Capability Registry

Maps (verb, target) capabilities to agents. The table is built once from
the agents passed at construction and is read-only afterwards; there is
no register() after the fact.

Example:
    >>> registry = AgentRegistry([NotesAgent(gen), DeleteAgent(TargetDomain.NOTES, sink)])
    >>> registry.get(ActionVerb.CREATE, TargetDomain.NOTES)
    <NotesAgent>
    >>> registry.get(ActionVerb.UPDATE, TargetDomain.NOTES) is None
    True
"""

import logging
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional

from studybuddy.enums.request import ActionVerb, TargetDomain
from studybuddy.services.orchestration.agents import BaseAgent, Capability

logger = logging.getLogger(__name__)


class AgentRegistry:
    """Immutable capability -> agent lookup."""

    def __init__(self, agents: Iterable[BaseAgent]) -> None:
        """
        Build the capability table.

        Args:
            agents: Agents to register; each may declare several capabilities

        Raises:
            ValueError: If two agents declare the same capability
        """
        table: dict[Capability, BaseAgent] = {}
        for agent in agents:
            for capability in sorted(agent.capabilities, key=lambda c: (c[0].value, c[1].value)):
                if capability in table:
                    verb, target = capability
                    raise ValueError(
                        f"Duplicate agent for {verb.value}/{target.value}: "
                        f"{table[capability].__class__.__name__} and "
                        f"{agent.__class__.__name__}"
                    )
                table[capability] = agent
                logger.debug(
                    f"Registered {agent.__class__.__name__} for "
                    f"{capability[0].value}/{capability[1].value}"
                )
        self._agents: Mapping[Capability, BaseAgent] = MappingProxyType(table)

    @property
    def capabilities(self) -> Mapping[Capability, BaseAgent]:
        """Read-only view of the capability table."""
        return self._agents

    def get(self, verb: ActionVerb, target: TargetDomain) -> Optional[BaseAgent]:
        return self._agents.get((verb, target))

    def supports(self, verb: ActionVerb, target: TargetDomain) -> bool:
        return (verb, target) in self._agents

    def list_agents(self) -> list[dict[str, Any]]:
        """
        List registered capabilities.

        Returns:
            List of dicts with 'verb', 'target' and 'agent' keys
        """
        return [
            {"verb": verb.value, "target": target.value, "agent": agent.__class__.__name__}
            for (verb, target), agent in self._agents.items()
        ]

    def __len__(self) -> int:
        return len(self._agents)
