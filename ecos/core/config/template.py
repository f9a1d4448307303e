from .base import BaseSettings


class TemplateSettings(BaseSettings):
    # relative to the directory containing the ecos package
    llm_path: str = "ecos/templates/llm"
