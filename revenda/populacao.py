"""
Provedor de população: estimativa do IBGE por município.

Fonte: API de agregados do IBGE (agregado 6579, variável 9324, último
período). Qualquer falha resulta em :data:`~revenda.config.POPULACAO_FALLBACK`,
que o motor de disponibilidade trata como entrada válida comum.

Uso standalone::

    python -m revenda.populacao 3303302
"""

import logging

import requests

from revenda.config import HEADERS, HTTP_TIMEOUT, IBGE_POPULACAO_URL, POPULACAO_FALLBACK

log = logging.getLogger(__name__)


def _extrair_populacao(dados: object) -> int:
    """Lê ``dados[0].resultados[0].series[0].serie`` e converte o 1º valor.

    Raises:
        ValueError: Estrutura inesperada ou valor não positivo.
    """
    try:
        serie = dados[0]["resultados"][0]["series"][0]["serie"]  # type: ignore[index]
    except (IndexError, KeyError, TypeError) as exc:
        raise ValueError("Estrutura de dados inesperada do IBGE") from exc

    if not isinstance(serie, dict) or not serie:
        raise ValueError("Série de população vazia")

    valor = next(iter(serie.values()))
    populacao = int(str(valor).strip())
    if populacao <= 0:
        raise ValueError(f"População inválida: {valor!r}")
    return populacao


def obter_populacao(codigo_ibge: str | int | None) -> int:
    """Retorna a população estimada do município *codigo_ibge*.

    Nunca propaga erro: rede fora, HTTP de erro, JSON malformado ou série
    ausente resultam em :data:`~revenda.config.POPULACAO_FALLBACK`.

    Args:
        codigo_ibge: Código IBGE de 7 dígitos (string ou inteiro).

    Returns:
        População estimada (inteiro positivo).
    """
    codigo = str(codigo_ibge or "").strip()
    if not codigo:
        log.warning("Município sem código IBGE. Usando estimativa %d.", POPULACAO_FALLBACK)
        return POPULACAO_FALLBACK

    url = IBGE_POPULACAO_URL.format(codigo=codigo)
    log.info("Consultando população no IBGE: %s", codigo)
    try:
        resp = requests.get(url, headers=HEADERS, timeout=HTTP_TIMEOUT)
        resp.raise_for_status()
        populacao = _extrair_populacao(resp.json())
    except (requests.RequestException, ValueError) as exc:
        log.warning(
            "Erro ao obter população real (%s). Usando estimativa %d.",
            exc,
            POPULACAO_FALLBACK,
        )
        return POPULACAO_FALLBACK

    log.info("  População de %s: %d", codigo, populacao)
    return populacao


if __name__ == "__main__":
    import sys

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    if len(sys.argv) != 2:
        print("Uso: python -m revenda.populacao CODIGO_IBGE", file=sys.stderr)
        sys.exit(2)
    print(obter_populacao(sys.argv[1]))
    sys.exit(0)
