"""
compiler.py - Invocação do compilador Bluespec (bsc)

Propósito:
    Executar o bsc sobre um arquivo e capturar seu stream de erro, que é a
    fonte dos diagnósticos publicados pelo servidor.

Componentes principais:
    - CompilerInvocationError: Falha ao executar o compilador
    - uri_to_path: file URI → Path
    - run_compiler: Executa o bsc e retorna stderr como texto

Dependências críticas:
    - subprocess (stdlib)
    - bsv_lsp.config.CompilerSettings

Exemplo de uso:
    from bsv_lsp.compiler import run_compiler
    from bsv_lsp.config import CompilerSettings

    stderr_text = run_compiler(Path("Top.bsv"), CompilerSettings())

Notas de implementação:
    - Chamada bloqueante: o servidor executa em thread separada
    - stdout e exit code não são inspecionados; exit code != 0 é normal
      quando há erros de compilação
    - stderr decodificado como UTF-8 com substituição de bytes inválidos
    - Diretório de trabalho = diretório do arquivo compilado
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Optional
from urllib.parse import unquote, urlparse

from bsv_lsp.config import CompilerSettings

logger = logging.getLogger(__name__)


class CompilerInvocationError(Exception):
    """O compilador não pôde ser executado (ausente, erro de spawn, timeout)."""

    def __init__(self, executable: str, path: str, reason: str):
        self.executable = executable
        self.path = path
        self.reason = reason
        super().__init__(f"Falha ao executar '{executable}' em {path}: {reason}")


def uri_to_path(uri: str) -> Optional[Path]:
    """
    Converte URI (ou caminho) de documento em Path.

    Aceita file URIs com percent-encoding, UNC (file://server/share) e
    drive Windows (file:///d:/path). Esquemas não-file retornam None.
    """
    if not uri:
        return None

    parsed = urlparse(uri)
    if parsed.scheme != "file":
        # Esquema de uma letra é drive Windows (c:\...), não URI
        if len(parsed.scheme) > 1:
            return None
        return Path(uri)

    path_str = unquote(parsed.path or "")

    # UNC paths: file://server/share/path -> //server/share/path
    if parsed.netloc and parsed.netloc != "localhost":
        path_str = f"//{parsed.netloc}{path_str}"

    # Windows drive: /d:/path -> d:/path
    if len(path_str) >= 3 and path_str[0] == "/" and path_str[2] == ":":
        path_str = path_str[1:]

    return Path(path_str)


def run_compiler(path: Path, settings: CompilerSettings) -> str:
    """
    Compila path com o bsc e retorna o stream de erro.

    Args:
        path: Arquivo .bsv a compilar
        settings: Executável, flags e timeout

    Returns:
        stderr do compilador como texto (UTF-8, lossy)

    Raises:
        CompilerInvocationError: executável não encontrado, erro de spawn
            ou timeout
    """
    command = settings.command(str(path))
    cwd = path.parent if str(path.parent) not in ("", ".") else None
    logger.debug(f"Executando: {' '.join(command)} (cwd={cwd})")

    try:
        completed = subprocess.run(
            command,
            cwd=cwd,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.PIPE,
            timeout=settings.timeout,
            check=False,
        )
    except FileNotFoundError as e:
        raise CompilerInvocationError(
            settings.executable, str(path), "executável não encontrado no PATH"
        ) from e
    except subprocess.TimeoutExpired as e:
        raise CompilerInvocationError(
            settings.executable, str(path), f"timeout após {settings.timeout}s"
        ) from e
    except OSError as e:
        raise CompilerInvocationError(settings.executable, str(path), str(e)) from e

    stderr_text = (completed.stderr or b"").decode("utf-8", errors="replace")
    logger.debug(
        f"{settings.executable} terminou com código {completed.returncode} "
        f"({len(stderr_text)} caracteres em stderr)"
    )
    return stderr_text
