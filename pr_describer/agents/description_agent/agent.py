"""
PR Description Agent: turns a diff summary into a pull request description.
"""

import logging
from typing import Any

from langchain_core.messages import HumanMessage

from pr_describer.agents.description_agent.prompts import create_description_prompt
from pr_describer.core.constants import EMPTY_DESCRIPTION_FALLBACK, ERROR_DESCRIPTION_FALLBACK
from pr_describer.integrations.providers import get_chat_model

logger = logging.getLogger(__name__)


class PRDescriptionAgent:
    """
    Drafts pull request descriptions with a chat model.

    generate() never raises: an empty completion yields EMPTY_DESCRIPTION_FALLBACK
    and any failure (including missing credentials) yields
    ERROR_DESCRIPTION_FALLBACK.
    """

    def __init__(self, llm: Any = None, agent_name: str = "description_agent"):
        self.agent_name = agent_name
        self._llm = llm

    @property
    def llm(self) -> Any:
        # Built on first use so a missing API key only fails description generation
        if self._llm is None:
            self._llm = get_chat_model(agent=self.agent_name)
        return self._llm

    async def generate(self, diff_summary: str) -> str:
        prompt = create_description_prompt(diff_summary)
        try:
            response = await self.llm.ainvoke([HumanMessage(content=prompt)])
            content = getattr(response, "content", response)
            description = content.strip() if isinstance(content, str) else ""
            if not description:
                logger.warning("Model returned an empty PR description")
                return EMPTY_DESCRIPTION_FALLBACK
            logger.info(f"Generated PR description ({len(description)} chars)")
            return description
        except Exception as e:
            logger.error(f"Error generating PR description: {e}", exc_info=True)
            return ERROR_DESCRIPTION_FALLBACK
