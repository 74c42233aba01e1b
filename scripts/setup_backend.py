"""Setup del backend Nakurity: inicializa el repo, instala dependencias y despliega.

Uso:
  python scripts/setup_backend.py --init      # primera vez
  python scripts/setup_backend.py --deploy    # despliegue a producción (Vercel)
  python scripts/setup_backend.py --build     # wheel/sdist en dist/
"""
from __future__ import annotations

import argparse
import logging
import secrets
import subprocess
import sys
from pathlib import Path
from typing import Sequence

ROOT_DIR = Path(__file__).resolve().parents[1]

_log = logging.getLogger("nakurity.setup")

GITIGNORE = """__pycache__/
*.py[cod]
.venv/
.env
.vercel
dist/
build/
*.egg-info/
*.log
"""

REQUIRED_SECRETS = ("GROQ_API_KEY", "NEURO_OS_API_KEY")


def generate_api_key() -> str:
    return secrets.token_hex(32)


def env_example(api_key: str) -> str:
    return (
        "# Groq API Key (get from https://console.groq.com)\n"
        "GROQ_API_KEY=your_groq_api_key_here\n"
        "\n"
        "# Neuro-OS API Key (generate secure random key)\n"
        f"NEURO_OS_API_KEY={api_key}\n"
    )


def run(cmd: Sequence[str], cwd: Path) -> None:
    """Ejecuta un comando; si falla, termina el proceso con su código de salida."""
    _log.info("$ %s", " ".join(cmd))
    res = subprocess.run(list(cmd), cwd=cwd)
    if res.returncode != 0:
        raise SystemExit(res.returncode or 1)


def init_repo(root: Path) -> None:
    _log.info("→ Initializing repository...")
    if not (root / ".git").exists():
        run(["git", "init"], cwd=root)
        _log.info("  ✓ Git initialized")

    (root / ".env.example").write_text(env_example(generate_api_key()), encoding="utf-8")
    _log.info("  ✓ Created .env.example")

    (root / ".gitignore").write_text(GITIGNORE, encoding="utf-8")
    _log.info("  ✓ Created .gitignore")

    _log.info("→ Installing dependencies...")
    run([sys.executable, "-m", "pip", "install", "-e", "."], cwd=root)
    _log.info("  ✓ Dependencies installed")

    _log.info("✓ Setup complete! Next steps:")
    _log.info("  1. Copy .env.example to .env")
    _log.info("  2. Add your Groq API key to .env")
    _log.info("  3. Run: python scripts/setup_backend.py --deploy")


def deploy(root: Path) -> None:
    _log.info("→ Deploying to Vercel...")
    if not (root / ".env").exists():
        _log.warning("⚠ .env file not found. Make sure to set secrets in the Vercel dashboard:")
        for name in REQUIRED_SECRETS:
            _log.warning("  - %s", name)
    run(["vercel", "--prod"], cwd=root)
    _log.info("✓ Deployed successfully!")


def build(root: Path) -> None:
    _log.info("→ Building distribution...")
    run([sys.executable, "-m", "build", "--outdir", "dist"], cwd=root)
    _log.info("✓ Build artifacts in dist/")


def main(argv: Sequence[str] | None = None, root: Path = ROOT_DIR) -> int:
    parser = argparse.ArgumentParser(prog="nakurity-setup", description="Nakurity Backend Setup")
    parser.add_argument("--init", action="store_true", help="Inicializa git, .env.example, .gitignore e instala dependencias")
    parser.add_argument("--deploy", action="store_true", help="Despliega a Vercel")
    parser.add_argument("--build", action="store_true", help="Construye wheel/sdist en dist/")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(message)s")
    _log.info("=== Nakurity Backend Setup ===")

    if args.init:
        init_repo(root)
    if args.deploy:
        deploy(root)
    if args.build:
        build(root)
    if not (args.init or args.deploy or args.build):
        _log.warning("No action specified. Use --help for usage.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
