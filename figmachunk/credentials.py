"""Access-token loading.

A ``--config=<path>`` argument naming an MCP client config file wins; the
token is read from ``mcpServers.figma.env.FIGMA_ACCESS_TOKEN`` there. If
that yields nothing, ``FIGMA_ACCESS_TOKEN`` from the environment is used.
"""

import json
import logging
import os
import sys
from pathlib import Path
from typing import Mapping, Optional, Sequence

from .errors import MissingCredentials

logger = logging.getLogger(__name__)

TOKEN_ENV_VAR = "FIGMA_ACCESS_TOKEN"
CONFIG_ARG_PREFIX = "--config="


def load_access_token(argv: Optional[Sequence[str]] = None,
                      environ: Optional[Mapping[str, str]] = None) -> str:
    """Find the Figma access token.

    Args:
        argv: Command-line arguments to search (defaults to sys.argv)
        environ: Environment to consult (defaults to os.environ)

    Returns:
        The access token

    Raises:
        MissingCredentials: If neither source provides a token
    """
    argv = sys.argv if argv is None else argv
    environ = os.environ if environ is None else environ

    config_path = _config_path_from_args(argv)
    if config_path is not None:
        token = _token_from_config_file(config_path)
        if token:
            logger.debug("Access token loaded from %s: %s", config_path, mask_token(token))
            return token

    token = environ.get(TOKEN_ENV_VAR)
    if not token:
        raise MissingCredentials(
            f"{TOKEN_ENV_VAR} is required. Provide it via environment variable or config file."
        )
    logger.debug("Using %s from environment: %s", TOKEN_ENV_VAR, mask_token(token))
    return token


def mask_token(token: str) -> str:
    """Shorten a token for log output."""
    return token[:8] + "..."


def _config_path_from_args(argv: Sequence[str]) -> Optional[Path]:
    for arg in argv:
        if arg.startswith(CONFIG_ARG_PREFIX):
            return Path(arg[len(CONFIG_ARG_PREFIX):])
    return None


def _token_from_config_file(path: Path) -> Optional[str]:
    try:
        config = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        logger.warning("Failed to load config from %s: %s", path, e)
        return None

    try:
        return config["mcpServers"]["figma"]["env"][TOKEN_ENV_VAR] or None
    except (KeyError, TypeError):
        logger.debug("No %s entry in %s", TOKEN_ENV_VAR, path)
        return None
