"""Static checks deciding whether a module configuration may be loaded.

Python module configurations are executable, so they are never run until a
lexical scan shows they contain no dynamic evaluation and no process exit.
Declarative YAML configurations are loaded with a safe loader and need no
scan. Both formats first go through a cheap text search for the
``asset_manager`` key, since most packages declare no assets at all.
"""

from __future__ import annotations

import io
import logging
import re
import tokenize
from pathlib import Path

logger = logging.getLogger(__name__)

YAML_SUFFIXES = frozenset({".yaml", ".yml"})

# Names whose presence as a NAME token makes a script unsafe to execute.
EVAL_TOKENS = frozenset({"eval", "exec", "compile"})
EXIT_TOKENS = frozenset(
    {
        "exit",
        "quit",
        "_exit",
        "abort",
        "kill",
        "SystemExit",
        # os.exec* replace the running process
        "execl",
        "execle",
        "execlp",
        "execlpe",
        "execv",
        "execve",
        "execvp",
        "execvpe",
    }
)
UNPARSEABLE_TOKENS = EVAL_TOKENS | EXIT_TOKENS

_SCRIPT_KEY_PATTERN = re.compile(r"""['"]asset_manager['"]\s*:""")
_YAML_KEY_PATTERN = re.compile(r"""['"]?\basset_manager\b['"]?\s*:""")


def is_declarative(path: Path) -> bool:
    """Return True when *path* is a YAML document rather than a script."""
    return Path(path).suffix.lower() in YAML_SUFFIXES


def needs_parsing(path: Path) -> bool:
    """Return True when the file mentions an ``asset_manager`` key."""
    contents = Path(path).read_text(encoding="utf-8", errors="replace")
    pattern = _YAML_KEY_PATTERN if is_declarative(path) else _SCRIPT_KEY_PATTERN
    return pattern.search(contents) is not None


def find_unparseable_tokens(source: bytes) -> list[tokenize.TokenInfo]:
    """Return every NAME token in *source* naming an eval or exit construct.

    Raises:
        tokenize.TokenError: If the source cannot be tokenized.
        SyntaxError: If the source has invalid indentation or encoding.
    """
    return [
        token
        for token in tokenize.tokenize(io.BytesIO(source).readline)
        if token.type == tokenize.NAME and token.string in UNPARSEABLE_TOKENS
    ]


def is_safe_to_parse(path: Path) -> bool:
    """Return True when the configuration at *path* may be loaded."""
    path = Path(path)
    if is_declarative(path):
        return True

    try:
        offending = find_unparseable_tokens(path.read_bytes())
    except (tokenize.TokenError, SyntaxError) as exc:
        logger.debug("Cannot tokenize %s: %s", path, exc)
        return False

    if offending:
        token = offending[0]
        logger.debug(
            "%s uses %s() on line %d", path, token.string, token.start[0]
        )
        return False
    return True


__all__ = [
    "EVAL_TOKENS",
    "EXIT_TOKENS",
    "UNPARSEABLE_TOKENS",
    "find_unparseable_tokens",
    "is_declarative",
    "is_safe_to_parse",
    "needs_parsing",
]
