import os

from pydantic import BaseModel, Field

from contentful_graph.core.links import ResolutionPolicy

DELIVERY_HOST = "cdn.contentful.com"
PREVIEW_HOST = "preview.contentful.com"

# Rate-limit retries are capped regardless of configuration.
MAX_RATE_LIMIT_RETRIES = 10


class ContentfulOptions(BaseModel):
    space_id: str
    delivery_api_key: str = ""
    preview_api_key: str = ""
    environment: str = "master"
    use_preview_api: bool = False
    max_number_of_rate_limit_retries: int = Field(default=0, ge=0)
    timeout: float = 30.0
    resolution_policy: ResolutionPolicy = ResolutionPolicy.ON_DEMAND

    @property
    def host(self) -> str:
        return PREVIEW_HOST if self.use_preview_api else DELIVERY_HOST

    @property
    def base_url(self) -> str:
        return f"https://{self.host}/spaces/{self.space_id}/environments/{self.environment}"

    @property
    def access_token(self) -> str:
        return self.preview_api_key if self.use_preview_api else self.delivery_api_key

    @property
    def rate_limit_retries(self) -> int:
        return min(self.max_number_of_rate_limit_retries, MAX_RATE_LIMIT_RETRIES)

    @classmethod
    def from_env(cls) -> "ContentfulOptions":
        """Build options from ``CONTENTFUL_*`` environment variables."""
        return cls(
            space_id=os.getenv("CONTENTFUL_SPACE_ID", ""),
            delivery_api_key=os.getenv("CONTENTFUL_DELIVERY_API_KEY", ""),
            preview_api_key=os.getenv("CONTENTFUL_PREVIEW_API_KEY", ""),
            environment=os.getenv("CONTENTFUL_ENVIRONMENT", "master"),
            use_preview_api=os.getenv("CONTENTFUL_USE_PREVIEW_API", "false").lower() in ("1", "true", "yes"),
            max_number_of_rate_limit_retries=int(os.getenv("CONTENTFUL_MAX_RATE_LIMIT_RETRIES", "0")),
            timeout=float(os.getenv("CONTENTFUL_TIMEOUT", "30")),
            resolution_policy=ResolutionPolicy(os.getenv("CONTENTFUL_RESOLUTION_POLICY", "on_demand")),
        )
