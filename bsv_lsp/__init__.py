"""
bsv_lsp - Language Server Protocol para Bluespec SystemVerilog

Propósito:
    Servidor LSP que executa o compilador bsc a cada abertura/salvamento
    de arquivo .bsv e publica seus erros e avisos como diagnósticos no
    VSCode e outros editores compatíveis com LSP.

Componentes principais:
    - server: Servidor principal usando pygls
    - compiler: Invocação do bsc
    - extractor: stderr do bsc → diagnósticos estruturados
    - positions: Linha/coluna dos cabeçalhos do bsc
    - converters: Conversão para Diagnostic do LSP
    - sessions: Estado por documento

Dependências críticas:
    - pygls: Framework LSP
    - bsc: Compilador Bluespec (no PATH ou configurado)

Exemplo de uso:
    python -m bsv_lsp
"""
from importlib.metadata import PackageNotFoundError, version as _pkg_version
from pathlib import Path
import re


def _read_version_from_pyproject() -> str:
    pyproject = Path(__file__).resolve().parents[1] / "pyproject.toml"
    try:
        text = pyproject.read_text(encoding="utf-8")
    except OSError:
        return "0.0.0"
    match = re.search(r'(?m)^version = "([^"]+)"\s*$', text)
    return match.group(1) if match else "0.0.0"


try:
    __version__ = _pkg_version("bsv-lsp")
except PackageNotFoundError:
    __version__ = _read_version_from_pyproject()

__all__ = ["server", "compiler", "extractor", "positions", "converters", "sessions"]
