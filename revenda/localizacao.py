"""
Resolução de localização: CEP ou nome → ``(cidade, UF, código IBGE)``.

Fontes usadas:

  - **ViaCEP** para CEPs (retorna o código IBGE junto com a localidade)
  - **Lista de municípios** para busca por nome, carregada pela cadeia
    ``cache local → API do IBGE (3 tentativas) → capitais hardcoded``
  - **Nominatim** (via geopy) para coordenadas de exibição no mapa

Uso standalone::

    python -m revenda.localizacao --cep 24020-071
    python -m revenda.localizacao --nome "sao goncalo"
"""

import logging
import re
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Callable, Iterable

import pandas as pd
import requests
from geopy.exc import GeocoderServiceError, GeocoderTimedOut, GeocoderUnavailable
from geopy.extra.rate_limiter import RateLimiter
from geopy.geocoders import Nominatim
from tqdm import tqdm

from revenda.config import (
    HEADERS,
    HTTP_TIMEOUT,
    IBGE_MUNICIPIOS_URL,
    MUNICIPIOS_CSV,
    MUNICIPIOS_FALLBACK,
    NOMINATIM_DELAY,
    NOMINATIM_USER_AGENT,
    PAUSA_TENTATIVAS,
    TENTATIVAS_MUNICIPIOS,
    VIACEP_URL,
)
from revenda.fontes import com_tentativas, primeira_fonte_valida
from revenda.texto import chave_municipio, normalizar_nome, normalizar_uf, texto_limpo

log = logging.getLogger(__name__)

_COLUNAS_CACHE: list[str] = ["CODIGO_IBGE", "NOME", "UF"]


class CepInvalidoError(ValueError):
    """CEP sem exatamente 8 dígitos."""


class LocalizacaoNaoEncontradaError(LookupError):
    """CEP ou município inexistente na fonte consultada."""


class ServicoIndisponivelError(RuntimeError):
    """Serviço externo de localização inacessível."""


@dataclass(frozen=True)
class Municipio:
    codigo_ibge: int
    nome: str
    uf: str


@dataclass(frozen=True)
class LocalSelecionado:
    """Local escolhido pelo usuário numa consulta.

    ``populacao`` fica ``None`` até a consulta ser avaliada.
    """

    cidade: str
    uf: str
    codigo_ibge: str
    populacao: int | None = None

    @property
    def rotulo(self) -> str:
        return f"{self.cidade} - {self.uf}"

    def com_populacao(self, populacao: int) -> "LocalSelecionado":
        return replace(self, populacao=populacao)


# ===========================================================================
# CEP → ViaCEP
# ===========================================================================


def normalizar_cep(cep: str) -> str:
    """Remove tudo que não é dígito e valida o tamanho.

    Raises:
        CepInvalidoError: Se o resultado não tiver 8 dígitos.
    """
    digitos = re.sub(r"\D", "", cep or "")
    if len(digitos) != 8:
        raise CepInvalidoError("CEP inválido. Digite 8 números.")
    return digitos


def formatar_cep(cep: str) -> str:
    """Aplica a máscara ``NNNNN-NNN`` a uma entrada parcial ou completa."""
    digitos = re.sub(r"\D", "", cep or "")[:8]
    if len(digitos) > 5:
        return f"{digitos[:5]}-{digitos[5:]}"
    return digitos


def buscar_cep(cep: str) -> LocalSelecionado:
    """Consulta o ViaCEP e devolve o local correspondente.

    Args:
        cep: CEP com ou sem máscara.

    Returns:
        :class:`LocalSelecionado` com cidade, UF e código IBGE.

    Raises:
        CepInvalidoError: CEP malformado (a API não é chamada).
        LocalizacaoNaoEncontradaError: ViaCEP respondeu ``{"erro": true}``.
        ServicoIndisponivelError: Falha de rede ou resposta ilegível.
    """
    limpo = normalizar_cep(cep)
    url = VIACEP_URL.format(cep=limpo)
    log.info("Consultando ViaCEP: %s", limpo)
    try:
        resp = requests.get(url, headers=HEADERS, timeout=HTTP_TIMEOUT)
        resp.raise_for_status()
        dados = resp.json()
    except (requests.RequestException, ValueError) as exc:
        log.error("Erro ao buscar CEP %s: %s", limpo, exc)
        raise ServicoIndisponivelError("Erro de conexão com ViaCEP.") from exc

    if not isinstance(dados, dict) or str(dados.get("erro", "")).lower() == "true":
        raise LocalizacaoNaoEncontradaError("CEP não encontrado.")

    cidade = texto_limpo(dados.get("localidade"))
    uf = normalizar_uf(dados.get("uf"))
    if not cidade or not uf:
        raise LocalizacaoNaoEncontradaError("CEP sem localidade associada.")

    local = LocalSelecionado(
        cidade=cidade, uf=uf, codigo_ibge=texto_limpo(dados.get("ibge"))
    )
    log.info("  CEP %s → %s (IBGE %s)", limpo, local.rotulo, local.codigo_ibge or "?")
    return local


# ===========================================================================
# Lista de municípios: cadeia cache → IBGE → hardcoded
# ===========================================================================


def _uf_do_registro_ibge(rec: dict) -> str:
    """Extrai a sigla da UF de um registro da API de localidades.

    A hierarquia ``microrregiao`` vem nula para alguns municípios recentes;
    nesses casos a UF é lida de ``regiao-imediata``.
    """
    caminhos = (
        ("microrregiao", "mesorregiao", "UF", "sigla"),
        ("regiao-imediata", "regiao-intermediaria", "UF", "sigla"),
    )
    for caminho in caminhos:
        no: object = rec
        for chave in caminho:
            no = no.get(chave) if isinstance(no, dict) else None
        if no:
            return str(no)
    return ""


def _municipios_do_cache(cache_path: Path) -> list[Municipio] | None:
    if not cache_path.exists():
        return None
    df = pd.read_csv(cache_path, encoding="utf-8-sig")
    faltando = set(_COLUNAS_CACHE) - set(df.columns)
    if faltando:
        raise KeyError(f"Colunas ausentes no cache: {sorted(faltando)}")
    municipios = [
        Municipio(int(rec["CODIGO_IBGE"]), str(rec["NOME"]), str(rec["UF"]))
        for rec in df.to_dict(orient="records")
    ]
    log.info("  Cache: %d municípios carregados", len(municipios))
    return municipios


def _municipios_da_api() -> list[Municipio] | None:
    resp = requests.get(IBGE_MUNICIPIOS_URL, headers=HEADERS, timeout=HTTP_TIMEOUT * 2)
    resp.raise_for_status()
    payload = resp.json()
    if not isinstance(payload, list):
        raise ValueError("Estrutura inesperada do IBGE")
    municipios: list[Municipio] = []
    for rec in payload:
        if not isinstance(rec, dict):
            raise ValueError("Estrutura inesperada do IBGE")
        uf = _uf_do_registro_ibge(rec)
        if not uf:
            log.debug("  Município sem UF ignorado: %s", rec.get("nome"))
            continue
        municipios.append(Municipio(int(rec["id"]), str(rec["nome"]), uf))
    return municipios or None


def _municipios_hardcoded() -> list[Municipio]:
    return [Municipio(*m) for m in MUNICIPIOS_FALLBACK]


def salvar_cache_municipios(
    municipios: Iterable[Municipio], cache_path: Path = MUNICIPIOS_CSV
) -> Path:
    """Grava a lista no CSV de cache (``utf-8-sig``)."""
    cache_path.parent.mkdir(parents=True, exist_ok=True)
    pd.DataFrame(
        [(m.codigo_ibge, m.nome, m.uf) for m in municipios],
        columns=_COLUNAS_CACHE,
    ).to_csv(cache_path, index=False, encoding="utf-8-sig")
    return cache_path


def carregar_municipios(
    cache_path: Path = MUNICIPIOS_CSV,
    tentativas: int = TENTATIVAS_MUNICIPIOS,
    pausa: float = PAUSA_TENTATIVAS,
) -> list[Municipio]:
    """Carrega a lista de municípios pela cadeia de fontes.

    Ordem: CSV de cache local → API do IBGE (*tentativas* chamadas com
    *pausa* fixa) → capitais hardcoded. Quando a API responde, o cache é
    regravado.

    Returns:
        Lista de :class:`Municipio`, nunca vazia.
    """
    log.info("Carregando lista de municípios...")
    nome, municipios = primeira_fonte_valida(
        [
            ("cache", lambda: _municipios_do_cache(cache_path)),
            (
                "ibge",
                com_tentativas(
                    _municipios_da_api,
                    tentativas=tentativas,
                    pausa=pausa,
                    descricao="API de municípios do IBGE",
                ),
            ),
            ("hardcoded", _municipios_hardcoded),
        ]
    )
    if nome == "ibge":
        try:
            salvar_cache_municipios(municipios, cache_path)
            log.info("  Cache de municípios atualizado: %s", cache_path)
        except OSError as exc:
            log.warning("  Não foi possível gravar o cache (%s).", exc)
    return municipios


# ===========================================================================
# Busca por nome
# ===========================================================================


def buscar_por_nome(
    termo: str, municipios: Iterable[Municipio], limite: int = 10
) -> list[Municipio]:
    """Autocomplete insensível a acentos e caixa.

    Correspondências por prefixo vêm antes das demais; empates em ordem
    alfabética normalizada.

    Raises:
        ValueError: Se *termo* for vazio.
    """
    alvo = normalizar_nome(termo)
    if not alvo:
        raise ValueError("Digite o nome de uma cidade para buscar.")

    prefixo: list[Municipio] = []
    contem: list[Municipio] = []
    for m in municipios:
        nome = normalizar_nome(m.nome)
        if nome.startswith(alvo):
            prefixo.append(m)
        elif alvo in nome:
            contem.append(m)

    def ordem(m: Municipio) -> tuple[str, str]:
        return (normalizar_nome(m.nome), m.uf)

    return (sorted(prefixo, key=ordem) + sorted(contem, key=ordem))[:limite]


def resolver_nome(
    cidade: str, uf: str, municipios: Iterable[Municipio]
) -> LocalSelecionado:
    """Converte ``(cidade, UF)`` digitados em :class:`LocalSelecionado`.

    Raises:
        ValueError: Cidade ou UF vazias.
        LocalizacaoNaoEncontradaError: Município ausente da lista.
    """
    if not texto_limpo(cidade) or not texto_limpo(uf):
        raise ValueError("Preencha Cidade e UF.")
    alvo = chave_municipio(cidade, uf)
    for m in municipios:
        if chave_municipio(m.nome, m.uf) == alvo:
            return LocalSelecionado(cidade=m.nome, uf=m.uf, codigo_ibge=str(m.codigo_ibge))
    raise LocalizacaoNaoEncontradaError(
        f"Município não encontrado: {texto_limpo(cidade)} - {normalizar_uf(uf)}"
    )


# ===========================================================================
# Coordenadas via Nominatim
# ===========================================================================


def criar_geocoder() -> Callable:
    """Nominatim com rate limit de 1 req/s (ToS)."""
    geolocator = Nominatim(user_agent=NOMINATIM_USER_AGENT)
    return RateLimiter(
        geolocator.geocode,
        min_delay_seconds=NOMINATIM_DELAY,
        error_wait_seconds=5,
    )


def geocodificar_municipio(
    cidade: str, uf: str, geocode: Callable | None = None
) -> tuple[float, float] | None:
    """Retorna ``(lat, lon)`` do município ou ``None`` se não resolvido."""
    geocode = geocode or criar_geocoder()
    consulta = f"{cidade}, {uf}, Brasil"
    try:
        loc = geocode(consulta)
    except (GeocoderServiceError, GeocoderTimedOut, GeocoderUnavailable) as exc:
        log.warning("  Falha ao geocodificar '%s': %s", consulta, exc)
        return None
    if not loc:
        log.warning("  Não geocodificado: '%s'", consulta)
        return None
    return (loc.latitude, loc.longitude)


def geocodificar_ocupadas(registros: list, geocode: Callable | None = None) -> int:
    """Preenche ``lat``/``lon`` dos registros de ocupação que ainda não têm.

    Os registros são alterados no lugar.

    Returns:
        Quantidade de registros que receberam coordenadas.
    """
    pendentes = [r for r in registros if r.lat is None or r.lon is None]
    log.info("  %d cidade(s) sem coordenadas", len(pendentes))
    if not pendentes:
        return 0

    geocode = geocode or criar_geocoder()
    n = 0
    for registro in tqdm(pendentes, desc="Geocodificando", unit="cidade"):
        coords = geocodificar_municipio(registro.cidade, registro.uf, geocode=geocode)
        if coords:
            registro.lat, registro.lon = coords
            n += 1
    log.info("  Geocodificadas: %d/%d", n, len(pendentes))
    return n


# ===========================================================================
# Entrypoint standalone: python -m revenda.localizacao
# ===========================================================================


def _build_arg_parser():  # type: ignore[return]
    import argparse

    parser = argparse.ArgumentParser(
        prog="python -m revenda.localizacao",
        description="Resolve um CEP ou nome de município.",
    )
    grupo = parser.add_mutually_exclusive_group(required=True)
    grupo.add_argument("--cep", metavar="CEP", help="CEP com ou sem máscara")
    grupo.add_argument("--nome", metavar="TERMO", help="Trecho do nome do município")
    return parser


if __name__ == "__main__":
    import sys

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    args = _build_arg_parser().parse_args()
    try:
        if args.cep:
            local = buscar_cep(args.cep)
            print(f"{local.rotulo}  (IBGE {local.codigo_ibge})")
        else:
            for m in buscar_por_nome(args.nome, carregar_municipios()):
                print(f"{m.codigo_ibge:<8} {m.nome} - {m.uf}")
    except (ValueError, LookupError, RuntimeError) as e:
        log.error("%s", e)
        sys.exit(1)
    sys.exit(0)
