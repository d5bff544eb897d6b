"""Agent workflow behind the geotargeting tool."""

from artemis.agents.targeting_agent import TargetingAgent, AgentState, TOOL_SPEC

__all__ = [
    "TargetingAgent",
    "AgentState",
    "TOOL_SPEC",
]
