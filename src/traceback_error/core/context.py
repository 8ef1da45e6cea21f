"""Origin context (project / computer / user) read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

PROJECT_VAR = "PROJECT_NAME"
COMPUTER_VAR = "HOSTNAME"
USER_VAR = "USER"


def missing_reason(var: str) -> str:
    return f"Unknown due to {var} missing"


@dataclass(frozen=True)
class OriginContext:
    project: str
    computer: str
    user: str


def read_origin_context(
    *,
    project_var: str = PROJECT_VAR,
    computer_var: str = COMPUTER_VAR,
    user_var: str = USER_VAR,
    environ: Optional[Mapping[str, str]] = None,
) -> OriginContext:
    """
    Read the origin context of the running process.

    Every missing variable is replaced by a diagnostic string naming the variable,
    never by an empty string.

    Usage example
    -------------
        ctx = read_origin_context(project_var="PROJECT_NAME")
        ctx.project  # "Unknown due to PROJECT_NAME missing" when unset
    """
    env = os.environ if environ is None else environ

    def _get(var: str) -> str:
        value = env.get(var)
        return value if value is not None else missing_reason(var)

    return OriginContext(
        project=_get(project_var),
        computer=_get(computer_var),
        user=_get(user_var),
    )
