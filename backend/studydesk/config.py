from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    api_base_url: str = "http://localhost:8000/api"
    request_timeout: float = 30.0
    generation_timeout: float = 180.0  # AI generation can take minutes
    rollback_star_on_failure: bool = True
    default_quiz_questions: int = 5
    max_notifications: int = 20
    host: str = "127.0.0.1"
    log_level: str = "warning"

    model_config = {"env_prefix": "STUDYDESK_"}


settings = Settings()
