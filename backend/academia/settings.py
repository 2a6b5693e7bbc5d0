from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import AliasChoices, Field

class Settings(BaseSettings):
	gemini_api_key: str | None = Field(default=None, validation_alias=AliasChoices("GEMINI_API_KEY", "API_KEY"))
	gemini_base_url: str = Field(default="https://generativelanguage.googleapis.com/v1beta", validation_alias="GEMINI_BASE_URL")
	# Text engines: "balanced", "fast" and "complex" in the writer
	gemini_model: str = Field(default="gemini-2.5-flash", validation_alias="GEMINI_MODEL")
	gemini_model_lite: str = Field(default="gemini-flash-lite-latest", validation_alias="GEMINI_MODEL_LITE")
	gemini_model_pro: str = Field(default="gemini-2.5-pro", validation_alias="GEMINI_MODEL_PRO")
	thinking_budget: int = Field(default=32768, validation_alias="GEMINI_THINKING_BUDGET")
	# Media models
	image_model: str = Field(default="imagen-4.0-generate-001", validation_alias="GEMINI_IMAGE_MODEL")
	tts_model: str = Field(default="gemini-2.5-flash-preview-tts", validation_alias="GEMINI_TTS_MODEL")
	tts_voice: str = Field(default="Kore", validation_alias="GEMINI_TTS_VOICE")
	tts_sample_rate: int = Field(default=24000, validation_alias="GEMINI_TTS_SAMPLE_RATE")
	live_model: str = Field(default="gemini-2.5-flash-native-audio-preview-09-2025", validation_alias="GEMINI_LIVE_MODEL")
	live_sample_rate: int = Field(default=16000, validation_alias="GEMINI_LIVE_SAMPLE_RATE")

	# Seconds; 0 disables the client timeout
	request_timeout: float = Field(default=120.0, validation_alias="GEMINI_REQUEST_TIMEOUT")

	# Studier sizing
	quiz_question_count: int = Field(default=5, validation_alias="QUIZ_QUESTION_COUNT")
	exam_question_count: int = Field(default=10, validation_alias="EXAM_QUESTION_COUNT")
	exam_seconds_per_question: int = Field(default=60, validation_alias="EXAM_SECONDS_PER_QUESTION")

	log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

	# pydantic-settings v2 style config
	model_config = SettingsConfigDict(env_file=".env", extra="ignore")

settings = Settings()
