# Chatmark project, MIT license.
#
# You're free to copy this file to your project and edit it for your needs,
# just keep this copyright line please :3

"""
Parser configuration.

Configuration can be created directly, or loaded from environment variables
through :meth:`ParserConfig.load_from_env`. Names of environment variables are
capitalized field names with a prefix, ``CHATMARK_`` by default:

- ``CHATMARK_STRICT`` -- ``y``, ``yes``, ``true`` or ``1`` enable strict
  parsing, ``n``, ``no``, ``false`` or ``0`` disable it;
- ``CHATMARK_RULES`` -- comma-separated names of rules to enable,
  in order of priority.

>>> ParserConfig.load_from_env(env={"CHATMARK_RULES": "bold, text"})
ParserConfig(strict=False, rules=['Bold', 'Text'])

"""

from __future__ import annotations

import os
from dataclasses import dataclass

import chatmark
import chatmark.errors
import chatmark.rules
from chatmark import _typing as _t

__all__ = [
    "ParserConfig",
]

_TRUE = ["y", "yes", "true", "1"]
_FALSE = ["n", "no", "false", "0"]


@dataclass(**chatmark._with_slots())
class ParserConfig:
    """
    Settings for :meth:`Parser.from_config <chatmark.parser.Parser.from_config>`.

    :raises ~chatmark.errors.ConfigError:
        if a rule name is unknown.

    """

    strict: bool = False
    """
    Raise :class:`~chatmark.errors.NoRuleMatched` instead of dropping
    unmatched text.

    """

    rules: list[str] | None = None
    """
    Names of rules to use, in order of priority. :data:`None` means
    all rules in their default order.

    """

    def __post_init__(self):
        if self.rules is not None:
            self.rules = [chatmark.rules.get_rule(name).__name__ for name in self.rules]

    @classmethod
    def load_from_env(
        cls,
        prefix: str = "CHATMARK_",
        env: _t.Mapping[str, str] | None = None,
    ) -> ParserConfig:
        """
        Load config from environment variables.

        :param prefix:
            prefix for names of all environment variables.
        :param env:
            mapping to read variables from, defaults to :data:`os.environ`.
        :raises ~chatmark.errors.ConfigError:
            if some variable has an invalid value.

        """

        if env is None:
            env = os.environ

        strict = False
        if (value := env.get(f"{prefix}STRICT")) is not None:
            strict = _parse_bool(f"{prefix}STRICT", value)

        rules = None
        if (value := env.get(f"{prefix}RULES")) is not None:
            rules = [name for name in value.split(",") if name.strip()]

        return cls(strict=strict, rules=rules)


def _parse_bool(name: str, value: str) -> bool:
    normalized = value.strip().lower()
    if normalized in _TRUE:
        return True
    if normalized in _FALSE:
        return False
    raise chatmark.errors.ConfigError(
        f"failed to load config from environment variables:\n"
        f"  {name}: can't parse {value!r}, enter either 'yes' or 'no'"
    )
