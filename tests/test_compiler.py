"""
test_compiler.py - Testes para invocação do bsc

Propósito:
    Validar comando, decodificação do stderr e tradução de falhas de
    execução em CompilerInvocationError. subprocess.run é sempre mockado;
    o bsc real não é necessário.
"""

from __future__ import annotations

import subprocess
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import patch

import pytest

from bsv_lsp.compiler import CompilerInvocationError, run_compiler, uri_to_path
from bsv_lsp.config import CompilerSettings


def _completed(stderr: bytes, returncode: int = 1):
    return SimpleNamespace(stderr=stderr, returncode=returncode)


def test_run_compiler_command_and_cwd():
    """Executa 'bsc -sim <arquivo>' no diretório do arquivo."""
    with patch("bsv_lsp.compiler.subprocess.run") as mock_run:
        mock_run.return_value = _completed(b"")

        run_compiler(Path("/ws/src/Top.bsv"), CompilerSettings())

        args, kwargs = mock_run.call_args
        assert args[0] == ["bsc", "-sim", str(Path("/ws/src/Top.bsv"))]
        assert kwargs["cwd"] == Path("/ws/src")
        assert kwargs["stderr"] == subprocess.PIPE
        assert kwargs["check"] is False


def test_run_compiler_uses_configured_executable_and_timeout():
    settings = CompilerSettings(executable="/opt/bsc/bin/bsc", args=("-verilog",), timeout=12.0)
    with patch("bsv_lsp.compiler.subprocess.run") as mock_run:
        mock_run.return_value = _completed(b"")

        run_compiler(Path("/ws/Top.bsv"), settings)

        args, kwargs = mock_run.call_args
        assert args[0][:2] == ["/opt/bsc/bin/bsc", "-verilog"]
        assert kwargs["timeout"] == 12.0


def test_run_compiler_returns_stderr_regardless_of_exit_code():
    """Exit code != 0 é fonte normal de diagnósticos."""
    stderr = b'Error: "Top.bsv", line 1, column 1: (P0005)\n  oops\n'
    with patch("bsv_lsp.compiler.subprocess.run") as mock_run:
        mock_run.return_value = _completed(stderr, returncode=1)

        assert run_compiler(Path("/ws/Top.bsv"), CompilerSettings()) == stderr.decode()


def test_run_compiler_lossy_decoding():
    """Bytes inválidos viram U+FFFD, sem exceção."""
    with patch("bsv_lsp.compiler.subprocess.run") as mock_run:
        mock_run.return_value = _completed(b"bad \xff byte")

        text = run_compiler(Path("/ws/Top.bsv"), CompilerSettings())

    assert text == "bad \ufffd byte"


def test_run_compiler_missing_executable():
    with patch("bsv_lsp.compiler.subprocess.run", side_effect=FileNotFoundError("bsc")):
        with pytest.raises(CompilerInvocationError) as exc_info:
            run_compiler(Path("/ws/Top.bsv"), CompilerSettings())

    assert exc_info.value.executable == "bsc"
    assert "bsc" in str(exc_info.value)


def test_run_compiler_timeout():
    error = subprocess.TimeoutExpired(cmd=["bsc"], timeout=1.0)
    with patch("bsv_lsp.compiler.subprocess.run", side_effect=error):
        with pytest.raises(CompilerInvocationError, match="timeout"):
            run_compiler(Path("/ws/Top.bsv"), CompilerSettings(timeout=1.0))


def test_run_compiler_spawn_error():
    with patch("bsv_lsp.compiler.subprocess.run", side_effect=PermissionError("denied")):
        with pytest.raises(CompilerInvocationError, match="denied"):
            run_compiler(Path("/ws/Top.bsv"), CompilerSettings())


class TestUriToPath:
    """Conversão de URI de documento para Path."""

    def test_file_uri(self):
        assert uri_to_path("file:///ws/src/Top.bsv") == Path("/ws/src/Top.bsv")

    def test_percent_encoded(self):
        assert uri_to_path("file:///ws/my%20dir/Top.bsv") == Path("/ws/my dir/Top.bsv")

    def test_windows_drive(self):
        assert uri_to_path("file:///d:/ws/Top.bsv") == Path("d:/ws/Top.bsv")

    def test_unc_host(self):
        assert uri_to_path("file://server/share/Top.bsv") == Path("//server/share/Top.bsv")

    def test_plain_path(self):
        assert uri_to_path("/ws/Top.bsv") == Path("/ws/Top.bsv")

    def test_unsupported_scheme(self):
        assert uri_to_path("untitled:Untitled-1") is None
        assert uri_to_path("git://ws/Top.bsv") is None
        assert uri_to_path("") is None
