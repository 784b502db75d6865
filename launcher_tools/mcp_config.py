"""Parse the MCP stdio server descriptor pasted into ``mcp_config_input``.

The expected shape is the one IDEs hand out for stdio MCP servers::

    {
      "type": "stdio",
      "command": "/path/to/java",
      "args": ["-classpath", "...", "com.example.Main"],
      "env": {"IJ_MCP_SERVER_PORT": "64342"}
    }

Bad input never raises: invalid JSON or a non-object yields ``None``, and a
field of the wrong type is dropped on its own.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field

from .core import logger


@dataclass(frozen=True)
class McpServerConfig:
    command: str | None = None
    args: list[str] = field(default_factory=list)
    env: dict[str, str] = field(default_factory=dict)


def parse_mcp_config(raw: str) -> McpServerConfig | None:
    if not raw or not raw.strip():
        return None
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        logger.debug(f"Ignoring MCP config: invalid JSON ({exc})")
        return None
    if not isinstance(data, dict):
        logger.debug("Ignoring MCP config: top-level value is not an object")
        return None

    command = data.get("command")
    if not isinstance(command, str) or not command:
        command = None

    args = data.get("args")
    if not isinstance(args, list) or not all(isinstance(a, str) for a in args):
        if args is not None:
            logger.debug("Ignoring MCP 'args': expected a list of strings")
        args = []

    env = data.get("env")
    if not isinstance(env, dict) or not all(isinstance(v, str) for v in env.values()):
        if env is not None:
            logger.debug("Ignoring MCP 'env': expected an object of strings")
        env = {}

    return McpServerConfig(command=command, args=list(args), env={str(k): v for k, v in env.items()})
