"""
Cadeia de fontes priorizadas com tentativas.

Cada fonte é tentada em ordem; a primeira que responde vence. A última fonte
da cadeia é tratada como estática e é usada incondicionalmente quando todas
as anteriores falham.
"""

import logging
import time
from typing import Callable, Sequence, TypeVar

log = logging.getLogger(__name__)

T = TypeVar("T")

#: ``(nome, carregador)``: o carregador levanta exceção ou retorna ``None``
#: para sinalizar falha
Fonte = tuple[str, Callable[[], T | None]]

#: Exceções tratadas como falha recuperável de uma fonte
ERROS_RECUPERAVEIS: tuple[type[Exception], ...] = (
    OSError,
    ValueError,
    KeyError,
    TypeError,
    RuntimeError,
)


def com_tentativas(
    carregador: Callable[[], T | None],
    tentativas: int = 3,
    pausa: float = 1.0,
    descricao: str = "fonte",
) -> Callable[[], T | None]:
    """Envolve *carregador* em até *tentativas* chamadas com pausa fixa.

    A pausa é a mesma entre todas as tentativas (sem backoff exponencial).
    Após a última falha, a exceção original é relançada para que a cadeia
    passe à próxima fonte.
    """
    if tentativas < 1:
        raise ValueError("tentativas deve ser >= 1")

    def _executar() -> T | None:
        for tentativa in range(1, tentativas + 1):
            try:
                resultado = carregador()
            except ERROS_RECUPERAVEIS as exc:
                log.warning(
                    "  Tentativa %d/%d de %s falhou: %s",
                    tentativa,
                    tentativas,
                    descricao,
                    exc,
                )
                if tentativa == tentativas:
                    raise
            else:
                if resultado is not None:
                    return resultado
                log.warning(
                    "  Tentativa %d/%d de %s sem dados.", tentativa, tentativas, descricao
                )
            if tentativa < tentativas:
                time.sleep(pausa)
        return None

    return _executar


def primeira_fonte_valida(fontes: Sequence[Fonte]) -> tuple[str, T]:
    """Percorre *fontes* em ordem e retorna ``(nome, valor)`` da primeira válida.

    Args:
        fontes: Sequência não vazia de ``(nome, carregador)``.

    Returns:
        Nome da fonte usada e o valor carregado. Quando todas as fontes
        anteriores falham, a última é chamada sem tratamento de erro.

    Raises:
        ValueError: Se *fontes* estiver vazia.
    """
    if not fontes:
        raise ValueError("A cadeia precisa de ao menos uma fonte.")

    *dinamicas, (nome_estatica, estatica) = fontes
    for nome, carregador in dinamicas:
        try:
            valor = carregador()
        except ERROS_RECUPERAVEIS as exc:
            log.warning("Fonte '%s' indisponível: %s", nome, exc)
            continue
        if valor:
            log.info("  Fonte usada: %s", nome)
            return nome, valor
        log.warning("Fonte '%s' sem dados.", nome)

    log.warning("Usando fonte estática: %s", nome_estatica)
    return nome_estatica, estatica()
