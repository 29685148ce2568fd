"""Text completion engines used for batch reviews and the PR summary.

The pipeline only needs ``complete(instruction, input_text) -> str``. The
default engine shells out to the agent CLI; a pydantic-ai engine is kept
for running against a model API directly.
"""

import logging
import subprocess
from pathlib import Path
from typing import Optional, Protocol

from pydantic_ai import Agent
from pydantic_ai.settings import ModelSettings

from reviewagent.config import ReviewConfig

logger = logging.getLogger(__name__)


class AgentError(Exception):
    """The agent could not produce a completion."""

    def __init__(self, message: str, exit_code: Optional[int] = None, stderr: str = ""):
        super().__init__(message)
        self.exit_code = exit_code
        self.stderr = stderr


class TextCompletionEngine(Protocol):
    def complete(self, instruction: str, input_text: str) -> str:
        ...


class CliCompletionEngine:
    """
    Runs ``<agent> chat --stdin -m <instruction> ...`` once per call.

    The input text goes to the process stdin and the completion is the
    captured stdout, returned verbatim.
    """

    def __init__(
        self,
        command: str,
        access_token: str,
        endpoint: str,
        model: Optional[str] = None,
        timeout: int = 600,
        cwd: Optional[Path] = None,
    ):
        self.command = command
        self.access_token = access_token
        self.endpoint = endpoint
        self.model = model
        self.timeout = timeout
        self.cwd = cwd

    def build_args(self, instruction: str) -> list[str]:
        args = [
            self.command, "chat",
            "--stdin",
            "-m", instruction,
            "--access-token", self.access_token,
            "--endpoint", self.endpoint,
        ]
        if self.model:
            args.extend(["--model", self.model])
        return args

    def _redacted(self, args: list[str]) -> str:
        shown = ["***" if self.access_token and a == self.access_token else a for a in args]
        # The instruction can be a whole guideline document
        shown[shown.index("-m") + 1] = "<instruction>"
        return " ".join(shown)

    def complete(self, instruction: str, input_text: str) -> str:
        args = self.build_args(instruction)
        logger.debug(f"Running agent: {self._redacted(args)}")
        logger.info(f"Agent input length: {len(input_text)}")

        # Bytes in and out: diffs may hold any encoding and CRLF must survive
        try:
            result = subprocess.run(
                args,
                input=input_text.encode("utf-8"),
                capture_output=True,
                timeout=self.timeout,
                cwd=str(self.cwd) if self.cwd else None,
            )
        except subprocess.TimeoutExpired:
            raise AgentError(f"{self.command} timed out after {self.timeout}s")
        except OSError as exc:
            raise AgentError(f"Could not start {self.command}: {exc}") from exc

        stdout = (result.stdout or b"").decode("utf-8", errors="replace")
        stderr = (result.stderr or b"").decode("utf-8", errors="replace")
        if stderr:
            logger.debug(f"Agent stderr: {stderr.strip()}")

        if result.returncode != 0:
            raise AgentError(
                f"{self.command} exited with code {result.returncode}: {stderr.strip()}",
                exit_code=result.returncode,
                stderr=stderr,
            )

        logger.info(f"Agent output length: {len(stdout)}")
        return stdout


class PydanticAIEngine:
    """Same contract over a pydantic-ai agent; the instruction is the system prompt."""

    def __init__(self, model: str, timeout: int = 600):
        self.model = model
        self.timeout = timeout

    def complete(self, instruction: str, input_text: str) -> str:
        try:
            agent = Agent(
                self.model,
                system_prompt=instruction,
                model_settings=ModelSettings(timeout=self.timeout),
                name="reviewer",
            )
            result = agent.run_sync(input_text)
        except Exception as exc:
            raise AgentError(f"{self.model} completion failed: {exc}") from exc
        return str(result.output)


def build_engine(config: ReviewConfig) -> TextCompletionEngine:
    """Pick the engine named by ``review_engine``."""
    if config.review_engine == "pydantic_ai":
        logger.info(f"Using pydantic-ai engine with model {config.llm_model}")
        return PydanticAIEngine(config.llm_model, timeout=config.agent_timeout)

    logger.info(f"Using {config.agent_command} CLI engine at {config.src_endpoint}")
    return CliCompletionEngine(
        command=config.agent_command,
        access_token=config.src_access_token,
        endpoint=config.src_endpoint,
        model=config.agent_model,
        timeout=config.agent_timeout,
        cwd=config.workspace,
    )
