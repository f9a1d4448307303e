from __future__ import annotations

import os
import sys
import types
from pathlib import Path

import pydantic as p
import xdg_base_dirs as xdg
from dependency_injector.containers import DeclarativeContainer
from dependency_injector.providers import Configuration, Container, Object, Provider, Resource, Singleton

import ecos
from ecos.model import DeploymentEnvironment

from ..config import Secrets, Settings
from ..config.source import parse_overrides
from ..di import NotReady
from ..provider import LoggingProvider
from .evaluation import EvaluationContainer
from .llm import LLMContainer
from .storage import StorageContainer
from .template import TemplateContainer


def provide_state_path() -> Path:
    """Directory for files the CLI keeps between runs, e.g. reports that could not be stored."""
    path = xdg.xdg_state_home() / "ecos"
    path.mkdir(parents=True, exist_ok=True)
    return path


class EcosContainer(DeclarativeContainer):
    config: Configuration = Configuration()
    secrets: Configuration = Configuration()

    debug: Provider[bool] = Singleton(bool)
    env: Provider[DeploymentEnvironment] = Singleton(DeploymentEnvironment)
    root: Object[NotReady | Path] = Object(NotReady())
    state_path: Provider[Path] = Resource(provide_state_path)

    logging: Provider[LoggingProvider] = Resource(LoggingProvider, config=config.logging, debug=debug)
    storage: Provider[StorageContainer] = Container(
        StorageContainer, config=config.storage, secrets=secrets, debug=debug, logging=logging, root=root
    )
    template: Provider[TemplateContainer] = Container(TemplateContainer, config=config.template)
    llm: Provider[LLMContainer] = Container(
        LLMContainer,
        config=config.llm,
        openai_secrets=secrets.llm.openai,
        anthropic_secrets=secrets.llm.anthropic,
    )
    evaluation: Provider[EvaluationContainer] = Container(
        EvaluationContainer,
        config=config.evaluation,
        grading=llm.grading,
        env=template.llm,
        session=storage.persistent.async_session,
    )

    @staticmethod
    def boot(
        ct: EcosContainer,
        /,
        debug: bool,
        env: DeploymentEnvironment,
        config_root: p.FileUrl,
        secrets_path: p.AnyUrl | None = None,
        override: tuple[str, ...] | None = None,
        wiring: tuple[str | types.ModuleType, ...] | None = None,
    ) -> None:
        """Load settings and secrets into ``ct`` and wire the modules that use ``di.Provide``.

        The debug flag and environment are fixed before the logging resource
        is first touched, since it reads both when it configures itself.
        """
        if config_root.scheme != "file":
            raise ValueError(f"config root must be a file:// url, got {config_root}")

        override = override or ()
        ct.debug.override(debug)
        ct.env.override(env)
        ct.config.from_pydantic(Settings(env=env, root=config_root, override=override))

        # template providers resolve paths against the source checkout
        ct.root.override(Path(os.path.dirname(ecos.__file__)).parent)
        modules = [m for name, m in sys.modules.items() if name.startswith("ecos.cli.")]
        ct.wire(packages=["ecos.storage", "ecos.core"], modules=[*modules, *(wiring or ())])

        logger = ct.logging().get_logger()
        if override:
            logger.info("configuration overridden", extra={"override": parse_overrides(override)})

        ct.secrets.from_pydantic(Secrets(env=env, root=secrets_path or config_root))
        logger.debug("container booted", extra={"env": env, "config": str(config_root), "debug": debug})
