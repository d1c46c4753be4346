"""
Configuration for the request dispatcher.

Every setting is resolved in the same order: explicit argument, then environment
variable, then the built-in default.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Optional, Tuple

logger = logging.getLogger(__name__)

DEFAULT_FORMAT = "json"

ENV_DEFAULT_FORMAT = "AYEAYE_DEFAULT_FORMAT"
ENV_ALLOWED_METHODS = "AYEAYE_ALLOWED_METHODS"


def _all_methods() -> Tuple[str, ...]:
    from .models import HTTPMethod

    return tuple(method.value for method in HTTPMethod)


@dataclass(frozen=True)
class ApiConfig:
    """Settings shared by the request normalizer and the orchestrator.

    Attributes:
        default_format: Output format used when the request path carries no ``.format`` suffix.
        allowed_methods: HTTP verbs the request normalizer accepts. Anything else is ignored
            in favour of the ambient method, or GET.
    """

    default_format: str = DEFAULT_FORMAT
    allowed_methods: Tuple[str, ...] = field(default_factory=_all_methods)

    @classmethod
    def from_env(
        cls,
        default_format: Optional[str] = None,
        allowed_methods: Optional[Tuple[str, ...]] = None,
    ) -> "ApiConfig":
        """Build a configuration from arguments and ``AYEAYE_*`` environment variables.

        Args:
            default_format: Explicit default format; wins over the environment.
            allowed_methods: Explicit allowed verbs; wins over the environment.

        Returns:
            A frozen ApiConfig
        """
        # Default format: arg > env > default
        final_format = default_format or os.environ.get(ENV_DEFAULT_FORMAT, "").strip() or DEFAULT_FORMAT

        # Allowed methods: arg > env > default
        if allowed_methods is None:
            env_value = os.environ.get(ENV_ALLOWED_METHODS, "")
            allowed_methods = cls._parse_methods(env_value) if env_value.strip() else _all_methods()

        return cls(default_format=final_format.lower(), allowed_methods=tuple(allowed_methods))

    @staticmethod
    def _parse_methods(value: str) -> Tuple[str, ...]:
        known = _all_methods()
        methods = []
        for name in value.split(","):
            name = name.strip().upper()
            if not name:
                continue
            if name not in known:
                logger.warning(f"Ignoring unknown HTTP method '{name}' in {ENV_ALLOWED_METHODS}")
                continue
            methods.append(name)
        return tuple(methods)
