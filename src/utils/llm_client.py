"""
LLM Client with Error Handling
Runs a pydantic-ai agent once and degrades to a fallback response on failure.
Nothing here retries: a failed call is logged and replaced, never repeated.
"""
from typing import Any, Callable, TypeVar
from loguru import logger
from pydantic_ai import Agent

# Type variable for generic agent output
T = TypeVar('T')


class LLMError(Exception):
    """Transient LLM failures (rate limits, timeouts, server errors)."""
    pass


class LLMCriticalError(Exception):
    """Non-recoverable errors (auth failure, invalid prompt, etc.)."""
    pass


def classify_llm_error(error: Exception) -> Exception:
    """
    Wrap a raw provider exception in LLMError or LLMCriticalError.

    Args:
        error: Exception raised by the agent run

    Returns:
        LLMCriticalError for auth / invalid-request failures,
        LLMError for everything else
    """
    error_msg = str(error).lower()

    if "authentication" in error_msg or "api key" in error_msg or "401" in error_msg:
        return LLMCriticalError(f"Authentication failed: {error}")

    if "invalid" in error_msg and "request" in error_msg:
        return LLMCriticalError(f"Invalid request: {error}")

    if "rate" in error_msg and "limit" in error_msg:
        return LLMError(f"Rate limit hit: {error}")

    if "timeout" in error_msg or "timed out" in error_msg:
        return LLMError(f"Timeout: {error}")

    if any(code in error_msg for code in ["500", "502", "503", "504", "529"]):
        return LLMError(f"Server error: {error}")

    return LLMError(f"Unknown error: {error}")


async def run_agent(agent: Agent, prompt: str, deps: Any = None) -> T:
    """
    Execute an agent once.

    Args:
        agent: The PydanticAI agent to run
        prompt: The prompt to send to the agent
        deps: Optional dependencies for the agent

    Returns:
        The agent's output (typed based on agent's output_type)

    Raises:
        LLMCriticalError: For non-recoverable failures
        LLMError: For any other failure
    """
    try:
        if deps is not None:
            result = await agent.run(prompt, deps=deps)
        else:
            result = await agent.run(prompt)
        return result.output

    except Exception as e:
        raise classify_llm_error(e) from e


async def run_agent_with_fallback(
    agent: Agent,
    prompt: str,
    fallback_factory: Callable[[], T],
    deps: Any = None
) -> T:
    """
    Executes an agent with a fallback response if the call fails.

    The user-facing flow never blocks on the language model: any
    failure is logged and the fallback is returned instead.

    Args:
        agent: The PydanticAI agent to run
        prompt: The prompt to send to the agent
        fallback_factory: Function that returns a safe default response
        deps: Optional dependencies for the agent

    Returns:
        Either the agent's output or the fallback response

    Example:
        >>> result = await run_agent_with_fallback(agent, prompt, get_fallback_analysis)
    """
    try:
        return await run_agent(agent, prompt, deps=deps)
    except LLMCriticalError as e:
        logger.error(f"🚨 LLM failed, using fallback response: {e}")
        return fallback_factory()
    except LLMError as e:
        logger.warning(f"🛟 LLM failed, using fallback response: {e}")
        return fallback_factory()
