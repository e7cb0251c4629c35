"""
LLM Node Implementation

This module provides the LLMNode class for calling a chat-completion endpoint
within a graph. On each execution the node:
- Fills its prompt template from state variables
- Sends a single user message (plus any advertised tool schemas)
- Parses the response body and stores it in the state's llm-response slot

The node never acts on tool calls in the response. A downstream FunctionNode
reads the stored response and dispatches through a ToolRegistry.
"""

from typing import Any, Dict, List, Optional, TYPE_CHECKING

from mirascope.core import BaseMessageParam
from pydantic import Field, model_validator

from llmgraph.core.config import LLMSettings
from llmgraph.core.errors import LLMError
from llmgraph.core.logging import get_logger, LogComponent, GraphLoggingConfig, log_verbose
from llmgraph.core.prompts import PromptTemplate
from llmgraph.core.structured import dumps, parse
from llmgraph.core.transport import (
    AiohttpTransport,
    HTTPRequest,
    Transport,
    TRANSPORT_ERRORS
)
from llmgraph.core.graph.nodes.base.node import Node

if TYPE_CHECKING:
    from llmgraph.core.graph.state import StateStore

logger = get_logger(LogComponent.NODES)


class LLMNode(Node):
    """
    Node for one round-trip to a language-model endpoint.

    Attributes:
        endpoint: URL of the chat-completion endpoint
        api_key: Credential sent as a bearer token
        model: Model identifier
        prompt: Template with '{}' positional placeholders
        variables: State keys filling the placeholders, in order
        tools: Tool schema descriptors to advertise
        transport: Optional transport; defaults to an AiohttpTransport
        timeout: Request timeout in seconds for the default transport
        logging_config: Controls prompt/response logging
    """
    endpoint: str = Field(..., description="Chat-completion endpoint URL")
    api_key: str = Field(default="", repr=False, description="Bearer credential")
    model: str = Field(default="", description="Model identifier")
    prompt: str = Field(default="", description="Prompt template with '{}' placeholders")
    variables: List[str] = Field(
        default_factory=list,
        description="State keys filling the placeholders, in order"
    )
    tools: List[Dict[str, Any]] = Field(
        default_factory=list,
        description="Tool schema descriptors advertised to the model"
    )
    transport: Optional[Any] = Field(default=None, exclude=True)
    timeout: Optional[float] = Field(default=None)
    logging_config: GraphLoggingConfig = Field(default_factory=GraphLoggingConfig)

    @model_validator(mode='after')
    def validate_template(self) -> "LLMNode":
        """Reject configurations whose variables do not match the placeholders."""
        PromptTemplate(text=self.prompt).check(self.variables)
        if self.transport is not None and not isinstance(self.transport, Transport):
            raise ValueError("transport must provide an async send(request) method")
        return self

    @classmethod
    def from_settings(
        cls,
        settings: LLMSettings,
        prompt: str = "",
        variables: Optional[List[str]] = None,
        **kwargs: Any
    ) -> "LLMNode":
        """Build a node from endpoint settings (usually read from the environment)."""
        return cls(
            endpoint=settings.endpoint,
            api_key=settings.api_key,
            model=settings.model,
            timeout=settings.timeout,
            prompt=prompt,
            variables=variables or [],
            **kwargs
        )

    def set_prompt(self, prompt: str, variables: Optional[List[str]] = None) -> None:
        """Replace the prompt template and, optionally, its variables."""
        variables = self.variables if variables is None else list(variables)
        PromptTemplate(text=prompt).check(variables)
        self.prompt = prompt
        self.variables = variables

    def set_model(self, model: str) -> None:
        self.model = model

    def render_prompt(self, state: "StateStore") -> str:
        """Fill the template from state.

        Raises:
            StateError: If a variable is missing or not string-coercible
            LLMError: TEMPLATE_MISMATCH if the template was altered inconsistently
        """
        values = [state.get_text(name) for name in self.variables]
        return PromptTemplate(text=self.prompt).fill(values)

    def build_payload(self, content: str) -> Dict[str, Any]:
        """Request body for a single user message."""
        message = BaseMessageParam(role="user", content=content)
        payload: Dict[str, Any] = {
            "model": self.model,
            "messages": [message.model_dump(include={"role", "content"})]
        }
        if self.tools:
            payload["tools"] = list(self.tools)
        return payload

    def build_request(self, payload: Dict[str, Any]) -> HTTPRequest:
        return HTTPRequest(
            method="POST",
            url=self.endpoint,
            headers={
                "Authorization": f"Bearer {self.api_key}",
                "Content-Type": "application/json"
            },
            body=dumps(payload).encode("utf-8")
        )

    def _transport(self) -> Transport:
        return self.transport or AiohttpTransport(timeout=self.timeout)

    async def execute(self, state: "StateStore") -> None:
        """Converse with the endpoint once and persist the parsed response."""
        content = self.render_prompt(state)
        if self.logging_config.show_llm_messages:
            logger.llm(f"Prompt to {self.model}: {content}")

        request = self.build_request(self.build_payload(content))

        try:
            response = await self._transport().send(request)
        except TRANSPORT_ERRORS as e:
            logger.error(f"Transport failure calling {self.endpoint}: {e!r}")
            raise LLMError.transport_failure(repr(e)) from e

        if not response.ok:
            logger.error(f"Endpoint returned HTTP {response.status}")
            raise LLMError.non_success_status(response.status, response.text())

        try:
            parsed = parse(response.body)
        except ValueError as e:
            raise LLMError.parse_failure(str(e), body=response.text()) from e

        log_verbose(logger, f"Response from {self.model}: {dumps(parsed)}")
        state.set_llm_response(parsed)
