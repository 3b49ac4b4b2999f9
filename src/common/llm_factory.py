"""
LLM factory.

All LLM access goes through ``create_extraction_llm`` so the model, the
temperature ceiling and the API credentials come from one place.

Usage:
    from src.common.llm_factory import create_extraction_llm

    llm = create_extraction_llm()
    response = llm.invoke([SystemMessage(content="..."), HumanMessage(content="...")])
"""

import logging
from typing import Any, List, Optional

from langchain_core.callbacks import BaseCallbackHandler
from langchain_openai import ChatOpenAI

from src.common.config import Config

logger = logging.getLogger(__name__)


def create_extraction_llm(
    model: Optional[str] = None,
    temperature: Optional[float] = None,
    callbacks: Optional[List[BaseCallbackHandler]] = None,
    **kwargs: Any,
) -> ChatOpenAI:
    """
    Create the chat model used for profile extraction.

    Args:
        model: Model name (defaults to Config.EXTRACTION_MODEL)
        temperature: Temperature (defaults to Config.EXTRACTION_TEMPERATURE),
            clamped to Config.MAX_EXTRACTION_TEMPERATURE
        callbacks: Optional LangChain callbacks
        **kwargs: Additional ChatOpenAI parameters

    Returns:
        ChatOpenAI instance
    """
    effective_model = model or Config.EXTRACTION_MODEL
    effective_temperature = (
        temperature if temperature is not None else Config.EXTRACTION_TEMPERATURE
    )
    if effective_temperature > Config.MAX_EXTRACTION_TEMPERATURE:
        logger.warning(
            f"Temperature {effective_temperature} above extraction ceiling, "
            f"using {Config.MAX_EXTRACTION_TEMPERATURE}"
        )
        effective_temperature = Config.MAX_EXTRACTION_TEMPERATURE

    llm = ChatOpenAI(
        model=effective_model,
        temperature=effective_temperature,
        api_key=Config.get_llm_api_key(),
        base_url=Config.get_llm_base_url(),
        callbacks=callbacks or None,
        # Retries are handled by the caller so 429s surface immediately
        max_retries=0,
        **kwargs,
    )

    logger.debug(f"Created extraction LLM: model={effective_model}, temperature={effective_temperature}")
    return llm
