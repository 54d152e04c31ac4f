"""
Painel de alertas do administrador: exclusividades vencendo ou vencidas.
"""

import logging
from dataclasses import dataclass, replace
from datetime import date, timedelta
from typing import Iterable

from revenda.config import DIAS_RENOVACAO
from revenda.registro import RegraExclusividade

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class AlertaExclusividade:
    cidade: str
    uf: str
    dias_restantes: int
    texto: str


def _texto_alerta(dias: int) -> str:
    if dias < 0:
        return f"Venceu há {abs(dias)} dias"
    if dias == 0:
        return "Vence Hoje!"
    return f"Vence em {dias} dias"


def alertas_vencimento(
    exclusivas: Iterable[RegraExclusividade],
    dias_aviso: int,
    hoje: date | None = None,
) -> list[AlertaExclusividade]:
    """Lista exclusividades que vencem em até *dias_aviso* dias ou já venceram.

    Exclusividades permanentes nunca geram alerta. Ordem: mais urgente
    primeiro.
    """
    hoje = hoje or date.today()
    alertas: list[AlertaExclusividade] = []
    for regra in exclusivas:
        if regra.valido_ate is None:
            continue
        dias = (regra.valido_ate - hoje).days
        if dias <= dias_aviso:
            alertas.append(
                AlertaExclusividade(regra.cidade, regra.uf, dias, _texto_alerta(dias))
            )
    alertas.sort(key=lambda a: a.dias_restantes)
    log.debug("  %d alerta(s) de vencimento", len(alertas))
    return alertas


def renovar(
    regra: RegraExclusividade, dias: int = DIAS_RENOVACAO
) -> RegraExclusividade:
    """Empurra o vencimento em *dias* a partir da data atual da regra.

    Raises:
        ValueError: Regra permanente ou *dias* não positivo.
    """
    if regra.valido_ate is None:
        raise ValueError(
            f"Exclusividade permanente não pode ser renovada: {regra.cidade} - {regra.uf}"
        )
    if dias <= 0:
        raise ValueError("Dias de renovação deve ser positivo.")
    return replace(regra, valido_ate=regra.valido_ate + timedelta(days=dias))


def descrever_validade(regra: RegraExclusividade, hoje: date | None = None) -> str:
    """Texto da listagem do administrador: ``Permanente`` ou ``Até DD/MM/AAAA``."""
    if regra.valido_ate is None:
        return "Permanente"
    hoje = hoje or date.today()
    texto = f"Até {regra.valido_ate.strftime('%d/%m/%Y')}"
    if regra.valido_ate < hoje:
        texto += " (Expirado)"
    return texto
