"""
server.py - Servidor LSP principal para Bluespec SystemVerilog usando pygls

Propósito:
    Servidor Language Server Protocol que publica os diagnósticos do
    compilador bsc para arquivos .bsv em editores compatíveis.

Componentes principais:
    - BsvLanguageServer: Servidor principal com pygls
    - validate_document: Compila, extrai e publica diagnósticos
    - Event handlers: did_open, did_save, did_change, did_close

Dependências críticas:
    - pygls: Framework LSP
    - bsv_lsp.compiler: Invocação do bsc
    - bsv_lsp.extractor / bsv_lsp.converters: stderr → Diagnostic

Exemplo de uso:
    python -m bsv_lsp

Notas de implementação:
    - Comunica via STDIO (entrada/saída padrão)
    - Compila apenas em didOpen e didSave; didChange não recompila
      (diagnósticos ficam desatualizados até o próximo save)
    - O bsc roda em ThreadPoolExecutor para não bloquear o event loop
    - Por documento, compilações são serializadas e só o resultado da
      requisição mais recente é publicado
    - Falha ao executar o bsc nunca derruba a sessão: loga e não publica
"""

from __future__ import annotations

import asyncio
import logging
import shutil
import sys
from concurrent.futures import ThreadPoolExecutor

from lsprotocol.types import (
    INITIALIZE,
    INITIALIZED,
    SHUTDOWN,
    TEXT_DOCUMENT_DID_CHANGE,
    TEXT_DOCUMENT_DID_CLOSE,
    TEXT_DOCUMENT_DID_OPEN,
    TEXT_DOCUMENT_DID_SAVE,
    WORKSPACE_DID_CHANGE_CONFIGURATION,
    DidChangeConfigurationParams,
    DidChangeTextDocumentParams,
    DidCloseTextDocumentParams,
    DidOpenTextDocumentParams,
    DidSaveTextDocumentParams,
    InitializedParams,
    InitializeParams,
    MessageType,
    TextDocumentSyncKind,
)
from pygls.server import LanguageServer

from bsv_lsp import __version__
from bsv_lsp.compiler import CompilerInvocationError, run_compiler, uri_to_path
from bsv_lsp.config import CompilerSettings, log_level_from_config, settings_from_config
from bsv_lsp.converters import build_diagnostics
from bsv_lsp.extractor import extract
from bsv_lsp.sessions import DocumentSessions

# Configuração de logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


class BsvLanguageServer(LanguageServer):
    """
    Servidor LSP especializado para Bluespec SystemVerilog.

    Attributes:
        compiler_settings: Executável, flags e timeout do bsc
        sessions: Estado aberto/fechado e gerações por documento
        compile_executor: Pool onde o bsc é executado
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.compiler_settings: CompilerSettings = CompilerSettings()
        self.sessions: DocumentSessions = DocumentSessions()
        self.compile_executor = ThreadPoolExecutor(
            max_workers=2, thread_name_prefix="bsv-lsp-compile"
        )


# Instância global do servidor
server = BsvLanguageServer(
    "bsv-lsp", f"v{__version__}", text_document_sync_kind=TextDocumentSyncKind.Full
)


async def validate_document(ls: BsvLanguageServer, uri: str) -> None:
    """
    Compila um documento com o bsc e publica seus diagnósticos.

    Args:
        ls: Instância do servidor
        uri: URI do documento a validar

    Fluxo:
        1. Registra nova geração para o documento
        2. Aguarda compilações anteriores do mesmo documento (lock)
        3. Executa o bsc no compile_executor
        4. Descarta o resultado se uma requisição mais nova chegou
        5. Extrai diagnósticos e publica, substituindo o conjunto anterior

    Tratamento de Erros:
        - CompilerInvocationError: log de erro no cliente, nada é publicado
        - Demais exceções: logadas, servidor continua responsivo
    """
    generation = ls.sessions.begin(uri)
    settings = ls.compiler_settings

    if not settings.enabled:
        logger.debug(f"Validação desabilitada, pulando: {uri}")
        ls.publish_diagnostics(uri, [])
        return

    path = uri_to_path(uri)
    if path is None:
        logger.warning(f"URI não suportada, ignorando: {uri}")
        return

    try:
        async with ls.sessions.lock(uri):
            if not ls.sessions.is_current(uri, generation):
                logger.debug(f"Requisição {generation} superada antes de compilar: {uri}")
                return

            loop = asyncio.get_running_loop()
            try:
                raw_text = await loop.run_in_executor(
                    ls.compile_executor, run_compiler, path, settings
                )
            except CompilerInvocationError as e:
                logger.error(f"Erro ao compilar {uri}: {e}")
                ls.show_message_log(
                    f"Failed to compile and get bsc diagnostics: {e}", MessageType.Error
                )
                return

            if not ls.sessions.is_current(uri, generation):
                logger.debug(f"Resultado obsoleto descartado (geração {generation}): {uri}")
                return

            diagnostics = build_diagnostics(extract(raw_text))
            logger.debug(f"Publishing {len(diagnostics)} diagnostics for {uri}")
            ls.publish_diagnostics(uri, diagnostics)
            logger.info(f"Validação completa: {uri} - {len(diagnostics)} diagnósticos")

    except Exception as e:
        # Log do erro mas não crash
        logger.error(f"Erro ao validar {uri}: {e}", exc_info=True)
    finally:
        # Documento fechado durante a compilação: o lock não é mais necessário
        ls.sessions.release_lock(uri)


@server.feature(INITIALIZE)
def initialize(ls: BsvLanguageServer, params: InitializeParams) -> None:
    """
    Lê initializationOptions (compiler, validation, logLevel).

    Aceita o formato {"bsv": {...}} ou a seção diretamente.
    """
    options = getattr(params, "initialization_options", None)
    level = log_level_from_config(options)
    if level is not None:
        logging.getLogger().setLevel(level)

    ls.compiler_settings = settings_from_config(options, ls.compiler_settings)
    logger.info(f"Compilador configurado: {' '.join(ls.compiler_settings.command('<file>'))}")


@server.feature(INITIALIZED)
def initialized(ls: BsvLanguageServer, params: InitializedParams) -> None:
    ls.show_message_log("BSV LSP has been initialized!", MessageType.Info)

    executable = ls.compiler_settings.executable
    if shutil.which(executable) is None:
        logger.warning(f"Compilador não encontrado no PATH: {executable}")
        ls.show_message_log(
            f"'{executable}' not found on PATH; no diagnostics will be reported.",
            MessageType.Warning,
        )


@server.feature(TEXT_DOCUMENT_DID_OPEN)
async def did_open(ls: BsvLanguageServer, params: DidOpenTextDocumentParams) -> None:
    """
    Handler para abertura de documento.

    Compila imediatamente quando usuário abre arquivo Bluespec.
    """
    uri = params.text_document.uri
    logger.info(f"Documento aberto: {uri}")
    ls.sessions.open(uri)
    await validate_document(ls, uri)


@server.feature(TEXT_DOCUMENT_DID_SAVE)
async def did_save(ls: BsvLanguageServer, params: DidSaveTextDocumentParams) -> None:
    """
    Handler para salvamento de documento.

    Recompila sempre e publica o conjunto completo de diagnósticos,
    substituindo o anterior.
    """
    uri = params.text_document.uri
    logger.info(f"Documento salvo: {uri}")
    await validate_document(ls, uri)


@server.feature(TEXT_DOCUMENT_DID_CHANGE)
def did_change(ls: BsvLanguageServer, params: DidChangeTextDocumentParams) -> None:
    """
    Handler para mudanças no documento.

    Não recompila: o bsc lê o arquivo do disco, então só faz sentido
    compilar após o save.
    """
    logger.debug(f"Documento modificado: {params.text_document.uri}")


@server.feature(TEXT_DOCUMENT_DID_CLOSE)
def did_close(ls: BsvLanguageServer, params: DidCloseTextDocumentParams) -> None:
    """
    Handler para fechamento de documento.

    Não publica nada; compilações em curso para o documento são descartadas.
    """
    uri = params.text_document.uri
    logger.info(f"Documento fechado: {uri}")
    ls.sessions.close(uri)


@server.feature(WORKSPACE_DID_CHANGE_CONFIGURATION)
async def did_change_configuration(
    ls: BsvLanguageServer, params: DidChangeConfigurationParams
) -> None:
    """
    Handler para mudanças na configuração do workspace.

    Atualiza bsv.compiler.* e bsv.validation.enabled. Reativar a validação
    recompila os documentos abertos; desativá-la limpa seus diagnósticos.

    Nota: A configuração vem diretamente no params.settings quando o cliente
    sincroniza via configurationSection: 'bsv' no LanguageClientOptions.
    """
    try:
        old_enabled = ls.compiler_settings.enabled
        ls.compiler_settings = settings_from_config(params.settings, ls.compiler_settings)
        new_enabled = ls.compiler_settings.enabled

        logger.info(
            f"Configuração atualizada: compiler = {ls.compiler_settings.executable}, "
            f"validation.enabled = {new_enabled}"
        )

        if not old_enabled and new_enabled:
            logger.info("Validação reativada, recompilando documentos abertos")
            for doc_uri in ls.sessions.open_uris():
                await validate_document(ls, doc_uri)

        elif old_enabled and not new_enabled:
            logger.info("Validação desativada, limpando diagnósticos")
            for doc_uri in ls.sessions.open_uris():
                ls.sessions.begin(doc_uri)
                ls.publish_diagnostics(doc_uri, [])

    except Exception as e:
        logger.error(f"Erro ao processar mudança de configuração: {e}", exc_info=True)


@server.feature(SHUTDOWN)
def shutdown(ls: BsvLanguageServer, params=None) -> None:
    ls.compile_executor.shutdown(wait=False)


def main() -> None:
    """
    Ponto de entrada principal do servidor.

    Inicia servidor LSP em modo STDIO.
    """
    logger.info("Iniciando BSV Language Server...")
    logger.info("Python executable: %s", sys.executable)
    logger.info("bsv-lsp package: %s", __version__)
    server.start_io()


if __name__ == "__main__":
    main()
