"""
Configuración de logging para la aplicación e integración con Uvicorn.
"""
import logging


def setup_logging(level: str = "INFO") -> None:
    lvl = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=lvl,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    logging.getLogger("nakurity").setLevel(lvl)
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logging.getLogger(name).setLevel(lvl)


def short(value: str | None, n: int = 8) -> str:
    """Trunca llaves/fingerprints para los logs (nunca se registran completos)."""
    return f"{(value or '')[:n]}..."
