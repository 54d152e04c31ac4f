"""
Registro de ocupação e regras de exclusividade mantidos pelo administrador.

Lookup por ``(cidade, UF)`` usa a mesma normalização da busca por nome
(:func:`revenda.texto.chave_municipio`), de modo que ``"sao paulo"/"sp"``
encontra o registro ``"São Paulo"/"SP"``.
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Generic, Iterator, TypeVar

from revenda.config import UFS
from revenda.texto import chave_municipio, normalizar_uf, texto_limpo

log = logging.getLogger(__name__)


@dataclass
class RegistroOcupacao:
    cidade: str
    uf: str
    revendedores: int = 0
    valido_ate: date | None = None
    lat: float | None = None
    lon: float | None = None

    @property
    def chave(self) -> tuple[str, str]:
        return chave_municipio(self.cidade, self.uf)

    def to_dict(self) -> dict:
        return {
            "cidade": self.cidade,
            "uf": self.uf,
            "revendedores": self.revendedores,
            "valido_ate": self.valido_ate.isoformat() if self.valido_ate else None,
            "lat": self.lat,
            "lon": self.lon,
        }

    @classmethod
    def from_dict(cls, dados: dict) -> "RegistroOcupacao":
        cidade, uf = validar_municipio(dados.get("cidade"), dados.get("uf"))
        return cls(
            cidade=cidade,
            uf=uf,
            revendedores=validar_revendedores(dados.get("revendedores", 0)),
            valido_ate=ler_data(dados.get("valido_ate")),
            lat=_float_ou_none(dados.get("lat")),
            lon=_float_ou_none(dados.get("lon")),
        )


@dataclass
class RegraExclusividade:
    """Bloqueio de novos revendedores numa cidade.

    Sem ``valido_ate`` a exclusividade é permanente.
    """

    cidade: str
    uf: str
    valido_ate: date | None = None

    @property
    def chave(self) -> tuple[str, str]:
        return chave_municipio(self.cidade, self.uf)

    def to_dict(self) -> dict:
        return {
            "cidade": self.cidade,
            "uf": self.uf,
            "valido_ate": self.valido_ate.isoformat() if self.valido_ate else None,
        }

    @classmethod
    def from_dict(cls, dados: dict) -> "RegraExclusividade":
        cidade, uf = validar_municipio(dados.get("cidade"), dados.get("uf"))
        return cls(cidade=cidade, uf=uf, valido_ate=ler_data(dados.get("valido_ate")))


# ===========================================================================
# Validação de campos
# ===========================================================================


def validar_municipio(cidade: object, uf: object) -> tuple[str, str]:
    """Valida e limpa ``(cidade, UF)``.

    Raises:
        ValueError: Cidade vazia, UF vazia ou UF desconhecida.
    """
    cidade_limpa = texto_limpo(cidade)
    uf_limpa = normalizar_uf(uf)
    if not cidade_limpa or not uf_limpa:
        raise ValueError("Preencha Cidade e UF.")
    if uf_limpa not in UFS:
        raise ValueError(f"UF inválida: {uf_limpa!r}")
    return cidade_limpa, uf_limpa


def validar_revendedores(valor: object) -> int:
    """Converte a quantidade de revendedores, exigindo inteiro >= 0."""
    if isinstance(valor, bool):
        raise ValueError("Quantidade de revendedores deve ser numérica.")
    try:
        n = int(str(valor).strip())
    except ValueError as exc:
        raise ValueError(
            f"Quantidade de revendedores deve ser numérica: {valor!r}"
        ) from exc
    if n < 0:
        raise ValueError("Quantidade de revendedores não pode ser negativa.")
    return n


def ler_data(valor: object) -> date | None:
    """Lê data ISO (``AAAA-MM-DD``) ou ``DD/MM/AAAA``; vazio → ``None``."""
    if valor is None or isinstance(valor, date):
        return valor  # type: ignore[return-value]
    texto = texto_limpo(valor)
    if not texto:
        return None
    if "/" in texto:
        dia, mes, ano = texto.split("/")
        return date(int(ano), int(mes), int(dia))
    return date.fromisoformat(texto[:10])


def _float_ou_none(valor: object) -> float | None:
    if valor is None or valor == "":
        return None
    return float(valor)  # type: ignore[arg-type]


# ===========================================================================
# Coleção indexada por (cidade, UF)
# ===========================================================================

R = TypeVar("R", RegistroOcupacao, RegraExclusividade)


class _Colecao(Generic[R]):
    """Lista ordenada por inserção com índice normalizado."""

    def __init__(self, itens: list[R] | None = None) -> None:
        self._itens: dict[tuple[str, str], R] = {}
        for item in itens or []:
            self._itens[item.chave] = item

    def encontrar(self, cidade: str, uf: str) -> R | None:
        return self._itens.get(chave_municipio(cidade, uf))

    def _guardar(self, item: R) -> R:
        self._itens[item.chave] = item
        return item

    def remover(self, cidade: str, uf: str) -> R:
        """Remove e retorna o item.

        Raises:
            KeyError: Se não houver item para ``(cidade, uf)``.
        """
        chave = chave_municipio(cidade, uf)
        if chave not in self._itens:
            raise KeyError(f"{texto_limpo(cidade)} - {normalizar_uf(uf)}")
        return self._itens.pop(chave)

    def listar(self) -> list[R]:
        return list(self._itens.values())

    def __iter__(self) -> Iterator[R]:
        return iter(self.listar())

    def __len__(self) -> int:
        return len(self._itens)

    def __contains__(self, chave: object) -> bool:
        if not isinstance(chave, tuple) or len(chave) != 2:
            return False
        return chave_municipio(*chave) in self._itens


class RegistroOcupacoes(_Colecao[RegistroOcupacao]):
    """Quantidade de revendedores por cidade."""

    def registrar(
        self,
        cidade: str,
        uf: str,
        revendedores: object,
        valido_ate: date | None = None,
    ) -> RegistroOcupacao:
        """Cria ou atualiza o registro da cidade.

        Coordenadas já geocodificadas são preservadas na atualização.
        """
        cidade, uf = validar_municipio(cidade, uf)
        n = validar_revendedores(revendedores)
        existente = self.encontrar(cidade, uf)
        if existente is not None:
            existente.revendedores = n
            existente.valido_ate = valido_ate
            log.info("Ocupação atualizada: %s - %s → %d", existente.cidade, uf, n)
            return existente
        log.info("Ocupação registrada: %s - %s → %d", cidade, uf, n)
        return self._guardar(RegistroOcupacao(cidade, uf, n, valido_ate))

    def revendedores_em(self, cidade: str, uf: str) -> int:
        """Revendedores atuais; cidade ausente do registro conta como 0."""
        registro = self.encontrar(cidade, uf)
        return registro.revendedores if registro else 0


class RegrasExclusividade(_Colecao[RegraExclusividade]):
    """Cidades com exclusividade (permanente ou até uma data)."""

    def adicionar(
        self, cidade: str, uf: str, valido_ate: date | None = None
    ) -> RegraExclusividade:
        cidade, uf = validar_municipio(cidade, uf)
        regra = RegraExclusividade(cidade, uf, valido_ate)
        log.info(
            "Exclusividade: %s - %s (%s)",
            cidade,
            uf,
            valido_ate.isoformat() if valido_ate else "permanente",
        )
        return self._guardar(regra)

    def substituir(self, regra: RegraExclusividade) -> RegraExclusividade:
        return self._guardar(regra)
