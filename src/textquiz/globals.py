from fastapi.templating import Jinja2Templates

from .config import settings
from .glossary import GlossaryManager

templates = Jinja2Templates(directory=settings.TEMPLATES_DIR)
glossary = GlossaryManager(settings.GLOSSARY_DIR)
