from pydantic import BaseModel, Field
from typing_extensions import Annotated


class AgentConfig(BaseModel):
    url: Annotated[str, Field(description='Base URL of the interaction agent, e.g. http://localhost:3000')]
    app_base_url: Annotated[str, Field(description='Base URL of the application the agent drives')]
    headless: Annotated[bool, Field(description='Whether the agent runs its browser headless', default=True)]
    timeout: Annotated[float, Field(description='Request timeout in seconds', default=30.0, gt=0)]
