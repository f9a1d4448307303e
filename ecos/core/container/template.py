import pathlib

import jinja2
from dependency_injector.containers import DeclarativeContainer
from dependency_injector.providers import Configuration, Provider, ThreadSafeSingleton

from ecos.core import di


@di.inject
def provide_llm_env(template_path: str, root_path: pathlib.Path = di.Provide["root"]) -> jinja2.Environment:
    """Provide Jinja2 environment for LLM prompt templates.

    Prompts are plain text: no autoescape, and block tags leave no blank
    lines behind.
    """
    import ecos.lib.json

    env = jinja2.Environment(
        loader=jinja2.FileSystemLoader(root_path.joinpath(template_path)),
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        undefined=jinja2.StrictUndefined,
    )
    env.policies.update({
        "json.dumps_function": ecos.lib.json.dumps,
    })
    return env


class TemplateContainer(DeclarativeContainer):
    config: Configuration = Configuration(strict=True)
    llm: Provider[jinja2.Environment] = ThreadSafeSingleton(provide_llm_env, config.llm_path)
