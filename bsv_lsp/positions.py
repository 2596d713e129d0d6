"""
positions.py - Extração de posição (linha/coluna) de cabeçalhos do bsc

Propósito:
    Ler o par linha/coluna 1-based de uma linha de cabeçalho de diagnóstico
    do bsc e convertê-lo para coordenadas 0-based do LSP.

Componentes principais:
    - line_of: linha 0-based ou None
    - column_of: coluna 0-based ou None

Exemplo de cabeçalho:
    Error: "Top.bsv", line 98, column 3: (P0005)

Notas de implementação:
    - None sinaliza ausência; o chamador aplica o default (0, 0)
    - Apenas dígitos ASCII são aceitos (sem sinal, sem espaços)
    - Linha/coluna 0 reportada pelo compilador é tratada como 0
"""

from __future__ import annotations

from typing import Optional

LINE_MARKER = ", line "
COLUMN_MARKER = ", column "


def _number_between(text: str, marker: str, terminator: str) -> Optional[int]:
    """Retorna o inteiro entre marker e o próximo terminator, ou None."""
    _, found, rest = text.partition(marker)
    if not found:
        return None

    value, found, _ = rest.partition(terminator)
    if not found:
        return None

    if not (value.isascii() and value.isdigit()):
        return None
    return int(value)


def _to_zero_based(value: Optional[int]) -> Optional[int]:
    if value is None:
        return None
    return max(0, value - 1)


def line_of(header_line: str) -> Optional[int]:
    """
    Extrai o número da linha (0-based) de um cabeçalho do bsc.

    Args:
        header_line: Linha de cabeçalho, ex: 'Error: "Top.bsv", line 98, column 3: (P0005)'

    Returns:
        97 para o exemplo acima; None se o trecho ", line N," não existir
        ou N não for numérico
    """
    return _to_zero_based(_number_between(header_line, LINE_MARKER, ","))


def column_of(header_line: str) -> Optional[int]:
    """
    Extrai o número da coluna (0-based) de um cabeçalho do bsc.

    O número vai de ", column " até o próximo ':'.
    """
    return _to_zero_based(_number_between(header_line, COLUMN_MARKER, ":"))
