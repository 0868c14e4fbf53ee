"""Data structures returned by the resolver."""

from pydantic import BaseModel, Field


class RedirectResult(BaseModel):
    """Outcome of a successful resolution."""

    model_config = {"frozen": True}

    url: str = Field(description="Fully qualified redirect target")
    domain: str = Field(description="Domain picked by weighted selection")
    headers: dict[str, str] = Field(
        default_factory=dict,
        description="Custom headers to attach to the redirect response",
    )
