from pydantic_settings import BaseSettings


class Config(BaseSettings):
    """Application configuration loaded from environment variables."""

    database_url: str
    host: str
    port: int
    debug: bool
    cors_origins: list[str] = []
    trust_proxy_headers: bool = False  # Resolve client address from X-Forwarded-For
    forwarded_allow_ips: list[str] = ["127.0.0.1"]  # Proxy addresses whose X-Forwarded-For is trusted
    llm_model: str = "gpt-3.5-turbo"
    llm_api_key: str = ""
    ai_mention_trigger: str = "@Blinko AI"  # Case-sensitive substring that forwards a comment to the AI responder
    ai_guest_name: str = "Blinko AI"  # Guest name the AI responder comments under

    model_config = {
        "env_file": [".env"],
        "env_prefix": "NOTETHREAD_",
        "extra": "ignore",
    }
