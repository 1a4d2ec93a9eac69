"""Execution context shared by the codexreview entry points."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

import yaml

from codexreview.constants import (
    CONFIG_FILE_NAME,
    DEFAULT_BASE_BRANCH,
    DEFAULT_RESULTS_DIR,
    DEFAULT_REVIEW_COMMAND,
    SUBPROCESS_TIMEOUT,
    SUPPORTED_EXTENSIONS,
)
from codexreview.errors import ConfigurationError
from codexreview.logger import get_logger

logger = get_logger(__name__)


def load_file_config(path: Path) -> Dict[str, Any]:
    """Load the optional YAML config file.

    Returns an empty dict when the file does not exist.

    Raises:
        ConfigurationError: If the file is not valid YAML or not a mapping.
    """
    if not path.exists():
        return {}

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f'Invalid config file {path}: {e}')

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f'Config file {path} must contain a mapping')

    logger.debug(f"Loaded config from {path}")
    return data


def _parse_extensions(value: Any) -> Tuple[str, ...]:
    if isinstance(value, str):
        items = value.split(',')
    elif isinstance(value, (list, tuple)):
        items = [str(v) for v in value]
    else:
        raise ConfigurationError(f'Invalid extensions setting: {value!r}')
    extensions = tuple(item.strip().lstrip('.').lower() for item in items if item.strip())
    if not extensions:
        raise ConfigurationError('At least one file extension must be configured')
    return extensions


@dataclass
class ExecutionContext:
    """Process-wide settings passed explicitly instead of read ad hoc."""

    working_dir: Path
    results_dir: Path
    review_command: str = DEFAULT_REVIEW_COMMAND
    base_branch: str = DEFAULT_BASE_BRANCH
    extensions: Tuple[str, ...] = field(default=SUPPORTED_EXTENSIONS)
    timeout_seconds: int = SUBPROCESS_TIMEOUT
    repository: Optional[str] = None
    pr_number: Optional[int] = None

    @classmethod
    def from_env(cls, env: Mapping[str, str], cwd: Path) -> "ExecutionContext":
        """Build the context from environment, config file and defaults.

        Environment variables win over ``.codex-config.yml``, which wins over
        the built-in defaults.
        """
        file_config = load_file_config(cwd / CONFIG_FILE_NAME)

        def resolve(env_key: str, file_key: str, fallback: Any) -> Any:
            value = (env.get(env_key) or '').strip()
            if value:
                return value
            file_value = file_config.get(file_key)
            return fallback if file_value in (None, '') else file_value

        results_dir = Path(str(resolve('CODEX_RESULTS_DIR', 'results_dir', DEFAULT_RESULTS_DIR)))
        if not results_dir.is_absolute():
            results_dir = cwd / results_dir

        timeout = resolve('CODEX_TIMEOUT_SECONDS', 'timeout_seconds', SUBPROCESS_TIMEOUT)
        try:
            timeout_seconds = int(timeout)
        except (TypeError, ValueError):
            raise ConfigurationError(f'Invalid timeout_seconds: {timeout}')

        pr_number_str = (env.get('PR_NUMBER') or '').strip()
        pr_number = None
        if pr_number_str:
            try:
                pr_number = int(pr_number_str)
            except ValueError:
                raise ConfigurationError(f'Invalid PR_NUMBER: {pr_number_str}')

        return cls(
            working_dir=cwd,
            results_dir=results_dir,
            review_command=str(resolve('CODEX_COMMAND', 'command', DEFAULT_REVIEW_COMMAND)),
            base_branch=str(resolve('CODEX_BASE_BRANCH', 'base_branch', DEFAULT_BASE_BRANCH)),
            extensions=_parse_extensions(resolve('CODEX_EXTENSIONS', 'extensions', SUPPORTED_EXTENSIONS)),
            timeout_seconds=timeout_seconds,
            repository=env.get('GITHUB_REPOSITORY') or None,
            pr_number=pr_number,
        )
