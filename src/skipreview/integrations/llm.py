"""OpenAI-compatible chat completion oracle."""

import json
from pathlib import Path
from typing import Optional

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import HumanMessage, SystemMessage
from langchain_openai import ChatOpenAI
from pydantic import SecretStr

from skipreview.config import SkipReviewConfig
from skipreview.diff import DiffBundle
from skipreview.errors import OracleIOError, OracleSchemaError

# Load prompt from file
PROMPT_PATH = Path(__file__).parent.parent / "prompts" / "classify.md"
CLASSIFY_PROMPT = PROMPT_PATH.read_text()


def build_user_prompt(bundle: DiffBundle) -> str:
    """Wrap the diff bundle in the classification request."""
    return (
        "Analyze the following pull request changes and determine if they "
        "qualify for skip-review:\n\n"
        f"{bundle.text}\n\n"
        "Provide your analysis in the specified JSON format."
    )


def parse_json_object(content: str) -> dict:
    """Parse the model's reply as a single JSON object."""
    try:
        data = json.loads(content)
    except (json.JSONDecodeError, TypeError) as e:
        raise OracleSchemaError(f"Oracle response is not valid JSON: {content[:200]!r}") from e
    if not isinstance(data, dict):
        raise OracleSchemaError(f"Oracle response is not a JSON object: {content[:200]!r}")
    return data


class OpenAIOracle:
    """Asks a chat model for a verdict, once per pull request."""

    def __init__(self, llm: BaseChatModel):
        self._llm = llm.bind(response_format={"type": "json_object"})

    @classmethod
    def from_config(cls, config: SkipReviewConfig, api_key: Optional[str]) -> "OpenAIOracle":
        llm = ChatOpenAI(
            model=config.model,
            api_key=SecretStr(api_key or ""),
            base_url=config.openai_base_url,
            # at most one inference request per run
            max_retries=0,
        )
        return cls(llm)

    def evaluate(self, bundle: DiffBundle) -> dict:
        try:
            response = self._llm.invoke(
                [
                    SystemMessage(content=CLASSIFY_PROMPT),
                    HumanMessage(content=build_user_prompt(bundle)),
                ]
            )
        except Exception as e:
            raise OracleIOError(f"Inference call failed: {e}") from e

        return parse_json_object(response.content)
