"""
converters.py - Conversão entre diagnósticos do bsc e tipos LSP

Propósito:
    Converter CompilerDiagnostic (saída do extractor) para tipos do
    protocolo LSP publicados ao cliente.

Componentes principais:
    - convert_severity: Severity → DiagnosticSeverity
    - convert_position: (linha, coluna) → Range pontual
    - build_diagnostic: CompilerDiagnostic → Diagnostic
    - build_diagnostics: lista de CompilerDiagnostic → List[Diagnostic]

Dependências críticas:
    - lsprotocol.types: Tipos do protocolo LSP

Exemplo de uso:
    from bsv_lsp.converters import build_diagnostics
    from bsv_lsp.extractor import extract

    diagnostics = build_diagnostics(extract(stderr_text))

Notas de implementação:
    - Coordenadas já chegam 0-based do extractor
    - O bsc reporta apenas pontos: start == end
"""

from __future__ import annotations

import logging
from typing import Iterable, List

from lsprotocol.types import (
    Diagnostic,
    DiagnosticSeverity,
    Position,
    Range,
)

from bsv_lsp.extractor import CompilerDiagnostic, Severity

logger = logging.getLogger(__name__)

DIAGNOSTIC_SOURCE = "bsc"


def convert_severity(severity: Severity) -> DiagnosticSeverity:
    """
    Mapeia Severity do bsc para DiagnosticSeverity do LSP.

    Mapeamento:
        ERROR   → DiagnosticSeverity.Error (1)
        WARNING → DiagnosticSeverity.Warning (2)
    """
    mapping = {
        Severity.ERROR: DiagnosticSeverity.Error,
        Severity.WARNING: DiagnosticSeverity.Warning,
    }
    return mapping.get(severity, DiagnosticSeverity.Error)


def convert_position(line: int, column: int) -> Range:
    """
    Constrói Range pontual (start == end) a partir de coordenadas 0-based.

    Valores negativos são tratados como 0.
    """
    position = Position(line=max(0, line), character=max(0, column))
    return Range(start=position, end=position)


def build_diagnostic(diagnostic: CompilerDiagnostic) -> Diagnostic:
    """Converte um CompilerDiagnostic em Diagnostic do LSP."""
    return Diagnostic(
        range=convert_position(diagnostic.line, diagnostic.column),
        severity=convert_severity(diagnostic.severity),
        source=DIAGNOSTIC_SOURCE,
        message=diagnostic.message,
    )


def build_diagnostics(diagnostics: Iterable[CompilerDiagnostic]) -> List[Diagnostic]:
    """
    Converte todos os diagnósticos extraídos, preservando a ordem do bsc.

    Args:
        diagnostics: Diagnósticos produzidos por extract()

    Returns:
        Lista de Diagnostic LSP
    """
    converted = [build_diagnostic(diagnostic) for diagnostic in diagnostics]
    logger.debug(f"Convertidos {len(converted)} diagnósticos do bsc")
    return converted
