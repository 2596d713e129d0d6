"""
config.py - Configuração do compilador e do servidor

Propósito:
    Definir as opções de invocação do bsc (executável, flags, timeout) e
    interpretar as configurações enviadas pelo cliente em
    initializationOptions e workspace/didChangeConfiguration.

Componentes principais:
    - CompilerSettings: Opções imutáveis de invocação
    - settings_from_config: dict do cliente → CompilerSettings
    - log_level_from_config: dict do cliente → nível de logging ou None

Formato aceito (com ou sem a seção 'bsv'):
    {
        "bsv": {
            "compiler": {"path": "bsc", "args": ["-sim"], "timeout": 60},
            "validation": {"enabled": true},
            "logLevel": "debug"
        }
    }

Notas de implementação:
    - Valores inválidos são ignorados (com warning) mantendo o valor anterior
    - Chaves ausentes mantêm o valor anterior
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Optional, Tuple

logger = logging.getLogger(__name__)

CONFIG_SECTION = "bsv"
DEFAULT_TIMEOUT = 120.0


@dataclass(frozen=True)
class CompilerSettings:
    """Opções de invocação do compilador Bluespec."""

    executable: str = "bsc"
    # -sim faz o bsc reportar mais diagnósticos (ex: conflitos de regras)
    args: Tuple[str, ...] = ("-sim",)
    # segundos; None desativa o limite
    timeout: Optional[float] = DEFAULT_TIMEOUT
    enabled: bool = True

    def command(self, path: str) -> list[str]:
        """Linha de comando completa para compilar path."""
        return [self.executable, *self.args, path]


def _section(config: Any) -> Optional[dict]:
    """Retorna a seção 'bsv' de config, ou o próprio config se já for a seção."""
    if not isinstance(config, dict):
        return None
    section = config.get(CONFIG_SECTION, config)
    return section if isinstance(section, dict) else None


def settings_from_config(
    config: Any, current: Optional[CompilerSettings] = None
) -> CompilerSettings:
    """
    Aplica as configurações do cliente sobre current.

    Args:
        config: settings de didChangeConfiguration ou initializationOptions
        current: Configuração vigente (padrão: CompilerSettings())

    Returns:
        Nova CompilerSettings
    """
    settings = current or CompilerSettings()
    section = _section(config)
    if section is None:
        return settings

    changes: dict[str, Any] = {}

    compiler = section.get("compiler", {})
    if isinstance(compiler, dict):
        path = compiler.get("path")
        if path is not None:
            if isinstance(path, str) and path.strip():
                changes["executable"] = path.strip()
            else:
                logger.warning(f"bsv.compiler.path inválido, ignorando: {path!r}")

        args = compiler.get("args")
        if args is not None:
            if isinstance(args, list) and all(isinstance(a, str) for a in args):
                changes["args"] = tuple(args)
            else:
                logger.warning(f"bsv.compiler.args inválido, ignorando: {args!r}")

        if "timeout" in compiler:
            timeout = compiler["timeout"]
            if timeout is None:
                changes["timeout"] = None
            elif isinstance(timeout, (int, float)) and not isinstance(timeout, bool) and timeout > 0:
                changes["timeout"] = float(timeout)
            else:
                logger.warning(f"bsv.compiler.timeout inválido, ignorando: {timeout!r}")
    else:
        logger.warning(f"bsv.compiler deveria ser um objeto, recebido: {compiler!r}")

    validation = section.get("validation", {})
    if isinstance(validation, dict) and "enabled" in validation:
        changes["enabled"] = bool(validation["enabled"])

    return replace(settings, **changes) if changes else settings


def log_level_from_config(config: Any) -> Optional[int]:
    """Converte 'logLevel' (ex: "debug") em nível do logging, ou None."""
    section = _section(config)
    if section is None:
        return None

    raw = section.get("logLevel")
    if not isinstance(raw, str) or not raw:
        return None

    level = getattr(logging, raw.upper(), None)
    if isinstance(level, int):
        return level

    logger.warning(f"logLevel desconhecido, ignorando: {raw!r}")
    return None
