"""Jinja2 template configuration for pages."""

from pathlib import Path

from fastapi.templating import Jinja2Templates

from doutor_agenda.config import settings

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.globals["app_name"] = settings.app_name
