from pr_describer.agents.description_agent.agent import PRDescriptionAgent

__all__ = ["PRDescriptionAgent"]
