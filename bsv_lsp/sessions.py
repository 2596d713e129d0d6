"""
sessions.py - Estado de sessão por documento

Propósito:
    Rastrear o ciclo de vida (aberto/fechado) de cada documento e numerar
    as requisições de validação para descartar resultados obsoletos do bsc.

Componentes principais:
    - SessionState: OPEN | CLOSED
    - DocumentSession: Estado de um documento aberto
    - DocumentSessions: Registro de sessões por URI

Notas de implementação:
    - Nenhum resultado de compilação é guardado entre eventos
    - Cada validação recebe uma nova geração (begin); só o resultado da
      geração corrente pode ser publicado (is_current)
    - Gerações vêm de um contador único do registro, então um resultado
      anterior ao fechamento nunca vale para o documento reaberto
    - Fechar o documento remove sua sessão e seu lock; um lock em uso só
      é descartado quando a compilação em curso termina (release_lock)
    - Um asyncio.Lock por URI serializa as execuções do compilador
"""

from __future__ import annotations

import asyncio
import itertools
import logging
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger(__name__)


class SessionState(Enum):
    CLOSED = "closed"
    OPEN = "open"


@dataclass
class DocumentSession:
    """Sessão de um documento aberto no editor."""

    uri: str
    state: SessionState = SessionState.CLOSED
    generation: int = 0


class DocumentSessions:
    """Registro de DocumentSession por URI."""

    def __init__(self):
        self._sessions: dict[str, DocumentSession] = {}
        self._locks: dict[str, asyncio.Lock] = {}
        self._generations = itertools.count(1)

    def open(self, uri: str) -> DocumentSession:
        """Closed → Open. Reabrir um documento aberto não muda nada."""
        session = self._sessions.get(uri)
        if session is None:
            session = DocumentSession(uri=uri, state=SessionState.OPEN)
            self._sessions[uri] = session
            logger.debug(f"Sessão aberta: {uri}")
        return session

    def close(self, uri: str) -> None:
        """Open → Closed. Resultados pendentes do documento são descartados."""
        session = self._sessions.pop(uri, None)
        if session:
            session.state = SessionState.CLOSED
            logger.debug(f"Sessão fechada: {uri}")

        self.release_lock(uri)

    def is_open(self, uri: str) -> bool:
        return uri in self._sessions

    def open_uris(self) -> list[str]:
        """URIs de todos os documentos abertos."""
        return list(self._sessions)

    def begin(self, uri: str) -> int:
        """Registra uma nova requisição de validação e retorna sua geração."""
        # didSave sem didOpen prévio (cliente fora de ordem) abre a sessão
        session = self.open(uri)
        session.generation = next(self._generations)
        return session.generation

    def is_current(self, uri: str, generation: int) -> bool:
        """Indica se generation ainda é a requisição mais recente de um documento aberto."""
        session = self._sessions.get(uri)
        return session is not None and session.generation == generation

    def lock(self, uri: str) -> asyncio.Lock:
        """Lock que serializa as compilações de um documento."""
        lock = self._locks.get(uri)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[uri] = lock
        return lock

    def release_lock(self, uri: str) -> None:
        """Descarta o lock de um documento fechado quando não há compilação em curso."""
        lock = self._locks.get(uri)
        if uri not in self._sessions and lock is not None and not lock.locked():
            del self._locks[uri]
