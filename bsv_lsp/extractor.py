"""
extractor.py - Extração de diagnósticos da saída textual do bsc

Propósito:
    Reclassificar o stream de erro (texto livre, multilinha) do compilador
    Bluespec em registros discretos de diagnóstico com severidade, posição
    e mensagem acumulada.

Componentes principais:
    - Severity: ERROR | WARNING
    - CompilerDiagnostic: Diagnóstico pontual (linha/coluna 0-based)
    - extract: texto bruto → lista de CompilerDiagnostic

Exemplo de uso:
    from bsv_lsp.extractor import extract

    diagnostics = extract(stderr_text)

Notas de implementação:
    - Passada única, sem estado entre chamadas
    - Linha de cabeçalho: contém "Error: " ou "Warning: "
    - Linhas de continuação são acumuladas (lstrip + um espaço separador)
    - Acumulador vazio nunca gera diagnóstico: um cabeçalho sem corpo
      não produz nada
    - O espaço separador final é preservado na mensagem
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List

from bsv_lsp.positions import column_of, line_of

logger = logging.getLogger(__name__)

ERROR_MARKER = "Error: "
WARNING_MARKER = "Warning: "


class Severity(Enum):
    """Severidade reportada pelo bsc."""

    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class CompilerDiagnostic:
    """Um diagnóstico do bsc, em coordenadas 0-based."""

    line: int
    column: int
    severity: Severity
    message: str


def is_header(line: str) -> bool:
    """Indica se a linha inicia um novo diagnóstico."""
    return ERROR_MARKER in line or WARNING_MARKER in line


def severity_of(header_line: str) -> Severity:
    # "Error: " tem precedência quando os dois marcadores aparecem
    if ERROR_MARKER in header_line:
        return Severity.ERROR
    return Severity.WARNING


def split_lines(text: str) -> List[str]:
    """
    Quebra text apenas em '\\n', removendo um '\\r' final de cada linha.

    Um '\\n' no fim do texto não gera linha vazia extra.
    """
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def extract(raw_text: str) -> List[CompilerDiagnostic]:
    """
    Converte a saída de erro do bsc em diagnósticos, na ordem de aparição.

    Args:
        raw_text: Stream de erro completo do compilador

    Returns:
        Lista de CompilerDiagnostic (possivelmente vazia)

    Exemplo:
        Error: "Top.bsv", line 98, column 3: (P0005)
          blah
        → [CompilerDiagnostic(line=97, column=2, severity=ERROR, message="blah ")]
    """
    diagnostics: List[CompilerDiagnostic] = []

    line_nr = 0
    column_nr = 0
    severity = Severity.ERROR
    buffer: List[str] = []

    for line in split_lines(raw_text):
        header = is_header(line)

        if header and buffer:
            diagnostics.append(
                CompilerDiagnostic(line_nr, column_nr, severity, "".join(buffer))
            )

        if header:
            severity = severity_of(line)
            parsed_line = line_of(line)
            parsed_column = column_of(line)
            if parsed_line is None or parsed_column is None:
                logger.debug(f"Posição não reconhecida no cabeçalho: {line!r}")
            line_nr = parsed_line if parsed_line is not None else 0
            column_nr = parsed_column if parsed_column is not None else 0
            buffer = []
        else:
            buffer.append(line.lstrip() + " ")

    if buffer:
        diagnostics.append(
            CompilerDiagnostic(line_nr, column_nr, severity, "".join(buffer))
        )

    return diagnostics
