"""pydantic-settings sources reading YAML configuration and vaulted secrets.

Both expect ``root`` (a file:// URL) and ``env`` among the init kwargs; they
look for one document per settings field, named after the field.
"""

import functools
import getpass
import os
import typing as t
from pathlib import Path

import pydantic as p
import yaml
from ansible.parsing.vault import VaultLib, VaultSecret
from pydantic_settings import PydanticBaseSettingsSource, SettingsError

import ecos.lib.util as util
from ecos.model import DeploymentEnvironment

VaultPasswordVariable = "ECOS_VAULT_PASSWORD"

# init kwargs describing where to look, never read from a document
BootFields = frozenset({"root", "env", "override"})


def config_paths(root: p.AnyUrl, env: DeploymentEnvironment) -> list[Path]:
    """Directories holding configuration for ``env``, the most specific last."""
    if root.scheme != "file" or not root.path:
        raise SettingsError(f"configuration must be read from a local directory, not {root}")
    base = Path(root.path)
    if env is DeploymentEnvironment.Local:
        return [base]
    return [base, base / "env.d" / env.value]


def parse_overrides(options: t.Iterable[str]) -> dict[str, t.Any]:
    """Turn ``key.path=value`` strings into a nested dict, values parsed as YAML."""
    tree: dict[str, t.Any] = {}
    for option in options:
        path, _, value = option.partition("=")
        *parents, leaf = [k.strip() for k in path.split(".")]
        node = tree
        for k in parents:
            node = node.setdefault(k, {})
        node[leaf] = yaml.safe_load(value.strip())
    return tree


class DocumentSource(PydanticBaseSettingsSource):
    """Builds the settings dict from ``document(field_name)``, one per field.

    A field whose document raises ``KeyError`` is left to the next source.
    """

    def document(self, field_name: str) -> t.Any:
        raise NotImplementedError

    @property
    def root(self) -> p.AnyUrl:
        return self.current_state["root"]

    @property
    def env(self) -> DeploymentEnvironment:
        return self.current_state["env"]

    def get_field_value(self, field: p.fields.FieldInfo, field_name: str) -> tuple[t.Any, str, bool]:
        if field_name in BootFields:
            raise KeyError(field_name)
        value = self.document(field_name)
        return value, field_name, isinstance(value, dict)

    def __call__(self) -> dict[str, t.Any]:
        values: dict[str, t.Any] = {}
        for name, field in self.settings_cls.model_fields.items():
            try:
                values[name], *_ = self.get_field_value(field, name)
            except KeyError:
                continue
            except (OSError, yaml.YAMLError) as e:
                raise SettingsError(f"could not read {name!r} from {type(self).__name__}") from e
        return values


class YAMLCascadingSettingsSource(DocumentSource):
    """Read ``<field>.yaml`` from the config root, then from ``env.d/<env>/``.

    The environment directory's file replaces the root's file for the same
    field rather than being merged into it. ``-o key.path=value`` overrides
    are merged on top of whichever file wins.
    """

    @functools.cached_property
    def overrides(self) -> dict[str, t.Any]:
        return parse_overrides(self.current_state.get("override", ()))

    def document(self, field_name: str) -> t.Any:
        files = [d / f"{field_name}.yaml" for d in config_paths(self.root, self.env)]
        found = [f for f in files if f.exists()]
        if not found and field_name not in self.overrides:
            raise KeyError(field_name)

        loaded = yaml.safe_load(found[-1].read_text(encoding="utf8")) if found else {}
        if field_name not in self.overrides:
            return loaded
        override = self.overrides[field_name]
        if isinstance(loaded, dict) and isinstance(override, dict):
            return util.deep_update(t.cast(dict[str, t.Any], loaded), override)
        return override


class AnsibleVaultSecretsSource(DocumentSource):
    """Secrets from an ansible-vault encrypted ``secrets.vault.yaml``.

    The file is looked up in the most specific configuration directory only.
    The vault password is taken from ``$ECOS_VAULT_PASSWORD``, else prompted
    for. Without a vault file nothing is prompted and no secrets are loaded.
    """

    @functools.cached_property
    def secrets(self) -> dict[str, t.Any]:
        path = config_paths(self.root, self.env)[-1] / "secrets.vault.yaml"
        if not path.exists():
            return {}

        password = os.environ.get(VaultPasswordVariable) or getpass.getpass(f"vault password for {path}: ")
        vault = VaultLib(secrets=[(None, VaultSecret(password.encode()))])
        return yaml.safe_load(vault.decrypt(path.read_bytes())) or {}

    def document(self, field_name: str) -> t.Any:
        if field_name not in self.secrets:
            raise KeyError(field_name)
        return self.secrets[field_name]
