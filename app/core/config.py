"""Configuración central de la aplicación (Pydantic Settings).

- Carga variables desde .env en la raíz del repositorio.
- Agrupa ajustes por área: App, CORS, Sesiones, Visión (Groq), Schedule.
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import AliasChoices, Field
from pathlib import Path

# Resuelve el .env ubicado en la raíz del backend (independiente del CWD)
ENV_FILE = Path(__file__).resolve().parents[2] / ".env"

DEFAULT_VISION_PROMPT = (
    "Analyze this screenshot and describe:\n"
    "1. What application or website is shown\n"
    "2. All visible UI elements (buttons, text, links, inputs) with their approximate positions\n"
    "3. Main content and purpose\n"
    "4. Any interactive elements the user could click on\n"
    "Be specific about locations (top-left, center, bottom-right, etc.)"
)


class Settings(BaseSettings):
    """Conjunto de variables de configuración con valores por defecto razonables.

    Nota: los valores pueden sobreescribirse vía variables de entorno (.env).
    """
    # App
    app_name: str = "Nakurity Backend"
    api_prefix: str = ""
    log_level: str = "INFO"

    # CORS (abierto a cualquier origen por defecto)
    cors_origins: list[str] = ["*"]
    cors_allow_any: bool = True

    # Sesiones efímeras
    session_timeout_ms: int = 5 * 60 * 1000
    max_sessions: int = 100
    heartbeat_interval_ms: int = 60_000
    # 0 = sin barrido periódico (solo barrido oportunista por petición)
    session_sweep_interval_seconds: float = 0

    # Rate limit del proxy de visión (ventana fija)
    vision_rate_limit: int = 10
    vision_rate_window_ms: int = 60_000

    # Groq (endpoint compatible con OpenAI)
    groq_api_key: str | None = None
    groq_base_url: str = "https://api.groq.com/openai/v1"
    vision_model_default: str = Field(
        "llama-3.2-90b-vision-preview",
        validation_alias=AliasChoices("VISION_MODEL", "VISION_MODEL_DEFAULT"),
    )
    vision_timeout_seconds: float = 30.0
    vision_temperature: float = 0.3
    vision_max_tokens: int = 1024
    vision_default_prompt: str = DEFAULT_VISION_PROMPT

    # Clave compartida opcional para /vision (header X-API-Key)
    neuro_os_api_key: str | None = None

    # Schedule rotativo (archivo JSON)
    schedule_file: Path = Path("data") / "ncom" / "videoSchedule.json"

    # --- Utilidades derivadas / helpers ---
    @property
    def api_prefix_normalized(self) -> str:
        """Devuelve `api_prefix` con formato consistente.

        - Siempre inicia con '/'
        - Sin '/' final (excepto cuando es solo '/')
        - Si está vacío, devuelve ""
        """
        pref = (self.api_prefix or "").strip()
        if not pref:
            return ""
        if not pref.startswith('/'):
            pref = '/' + pref
        if len(pref) > 1 and pref.endswith('/'):
            pref = pref[:-1]
        return pref

    @property
    def vision_configured(self) -> bool:
        return bool(self.groq_api_key)

    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # no fallar si hay variables no usadas
    )


settings = Settings()
