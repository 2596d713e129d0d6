"""
test_positions.py - Testes para extração de linha/coluna de cabeçalhos do bsc

Propósito:
    Validar a conversão 1-based → 0-based e a sinalização de ausência (None)
    para cabeçalhos mal-formados.
"""

from __future__ import annotations

import pytest

from bsv_lsp.positions import column_of, line_of

HEADER = 'Error: "Top.bsv", line 98, column 3: (P0005)'


def test_line_of_header():
    """Linha 98 (1-based) → 97 (0-based)."""
    assert line_of(HEADER) == 97


def test_column_of_header():
    """Coluna 3 (1-based) → 2 (0-based)."""
    assert column_of(HEADER) == 2


def test_first_line_maps_to_zero():
    assert line_of('Warning: "A.bsv", line 1, column 1: (G0010)') == 0
    assert column_of('Warning: "A.bsv", line 1, column 1: (G0010)') == 0


def test_reported_zero_is_clamped():
    """Linha 0 reportada não vira negativa."""
    assert line_of('Error: "A.bsv", line 0, column 0: (X)') == 0
    assert column_of('Error: "A.bsv", line 0, column 0: (X)') == 0


@pytest.mark.parametrize(
    "header",
    [
        'Error: "Top.bsv": (P0005)',
        'Error: "Top.bsv", line , column 3: (P0005)',
        'Error: "Top.bsv", line abc, column 3: (P0005)',
        'Error: "Top.bsv", line -4, column 3: (P0005)',
        'Error: "Top.bsv", line 98',
    ],
)
def test_line_absent(header):
    """Trecho ausente, vazio, não numérico ou sem vírgula final → None."""
    assert line_of(header) is None


@pytest.mark.parametrize(
    "header",
    [
        'Error: "Top.bsv", line 98: (P0005)',
        'Error: "Top.bsv", line 98, column x: (P0005)',
        'Error: "Top.bsv", line 98, column 3',
        'Error: "Top.bsv", line 98, column +3: (P0005)',
    ],
)
def test_column_absent(header):
    assert column_of(header) is None


def test_line_and_column_are_independent():
    """Coluna ausente não impede a leitura da linha."""
    header = 'Error: "Top.bsv", line 12, col 3: (P0005)'
    assert line_of(header) == 11
    assert column_of(header) is None


def test_non_ascii_digits_rejected():
    assert line_of('Error: "A.bsv", line ٣٤, column 1: (X)') is None
