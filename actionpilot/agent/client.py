import logging
import time

import httpx
from pydantic import ValidationError

from .command import AgentCommand, AgentResponse

logger = logging.getLogger(__name__)


def elapsed_ms(start: float) -> int:
    return int((time.monotonic() - start) * 1000)


class AgentClient:
    """HTTP client of the interaction agent.

    The agent exposes ``POST /execute``, ``POST /initialize``, ``POST /close``
    and ``GET /health``. Transport errors and non-200 responses are returned
    as failed ``AgentResponse`` values instead of being raised.
    """

    def __init__(self, base_url: str, timeout: float = 30.0, http_client: httpx.AsyncClient | None = None,
                 transport: httpx.AsyncBaseTransport | None = None):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self._owns_client = http_client is None
        self.http_client = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(timeout, connect=10.0),
            transport=transport,
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.aclose()

    async def aclose(self):
        """Release the underlying HTTP connection pool if this client created it."""
        if self._owns_client:
            await self.http_client.aclose()

    async def execute(self, command: AgentCommand) -> AgentResponse:
        start = time.monotonic()
        logger.debug("Executing command: %s", command)
        try:
            response = await self.http_client.post(
                f'{self.base_url}/execute',
                json=command.model_dump(mode='json'),
            )
        except httpx.HTTPError as e:
            error = f"Failed to communicate with agent: {e}"
            logger.error(error)
            return AgentResponse.failure(error, elapsed_ms(start))

        if response.status_code != 200:
            error = f"Agent returned status {response.status_code}: {response.text}"
            logger.error(error)
            return AgentResponse.failure(error, elapsed_ms(start))

        agent_response = self._parse(response, elapsed_ms(start))
        logger.debug("Command executed in %dms", elapsed_ms(start))
        return agent_response

    async def initialize(self, app_base_url: str, headless: bool = True) -> AgentResponse:
        """Open a browser session on the application under automation."""
        try:
            response = await self.http_client.post(
                f'{self.base_url}/initialize',
                json={'baseUrl': app_base_url, 'headless': headless},
            )
        except httpx.HTTPError as e:
            error = f"Failed to initialize agent: {e}"
            logger.error(error)
            return AgentResponse.failure(error)

        if response.status_code != 200:
            error = f"Failed to initialize agent: status {response.status_code}"
            logger.error(error)
            return AgentResponse.failure(error)
        return self._parse(response)

    async def close(self) -> AgentResponse:
        """Close the agent's browser session."""
        try:
            response = await self.http_client.post(f'{self.base_url}/close', timeout=10.0)
        except httpx.HTTPError as e:
            logger.error("Failed to close agent: %s", e)
            return AgentResponse.failure(f"Failed to close agent: {e}")

        if response.status_code != 200:
            return AgentResponse.failure("Failed to close agent")
        return self._parse(response)

    async def is_available(self) -> bool:
        try:
            response = await self.http_client.get(f'{self.base_url}/health', timeout=5.0)
        except httpx.HTTPError as e:
            logger.debug("Agent health check failed: %s", e)
            return False
        return response.status_code == 200

    @staticmethod
    def _parse(response: httpx.Response, execution_time_ms: int = 0) -> AgentResponse:
        try:
            return AgentResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            error = f"Invalid agent response: {e}"
            logger.error(error)
            return AgentResponse.failure(error, execution_time_ms)
