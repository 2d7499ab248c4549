from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    host: str = "0.0.0.0"
    port: int = 8000
    cors_allowed_origins: str = "http://localhost:3000,http://127.0.0.1:3000"

    max_text_file_bytes: int = 10 * 1024 * 1024
    max_image_file_bytes: int = 10 * 1024 * 1024
    max_pdf_file_bytes: int = 25 * 1024 * 1024
    max_pdf_pages: int = 400

    min_content_chars: int = 500
    cleanup_min_length_ratio: float = 0.5
    line_break_threshold: float = 3.0

    pdf_char_limit: int = 30000
    image_char_limit: int = 20000
    paragraph_limit: int = 100

    workspace_root: str = ""
    direct_extractors: str = "pdftotext,pdfplumber"
    pdftotext_path: str = "pdftotext"
    pdftoppm_path: str = "pdftoppm"
    tool_timeout_seconds: int = 60
    ocr_render_dpi: int = 200
    thumbnail_max_size: int = 300

    native_vision_model: str = "gemini-flash"
    ocr_vision_model: str = "claude-sonnet"
    cleanup_model: str = "gemini-flash"
    vision_temperature: float = 0.1
    vision_max_output_tokens: int = 8192
    llm_timeout_seconds: int = 60
    cleanup_timeout_seconds: int = 60

    gemini_api_key: str = ""
    anthropic_api_key: str = ""
    openai_api_key: str = ""
    openai_base_url: str = ""
    use_example_llm: bool = False
