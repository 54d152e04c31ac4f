"""
Motor de disponibilidade de praças.

Função pura: recebe população, revendedores atuais, regra de densidade e a
regra de exclusividade (opcional) da cidade, e classifica a praça como
disponível ou indisponível. Não faz I/O.

Regras, em ordem:

1. Exclusividade ativa (sem data, ou data >= hoje) **e** ao menos um
   revendedor na praça → indisponível, com motivo genérico. A data de
   vencimento nunca aparece no resultado.
2. ``max = floor(populacao / regra_densidade)`` e ``vagas = max - atuais``.
3. ``vagas > 0`` → disponível; caso contrário → limite populacional atingido.
"""

import math
from dataclasses import dataclass
from datetime import date
from numbers import Real

from revenda.registro import RegraExclusividade

DISPONIVEL: str = "disponivel"
INDISPONIVEL: str = "indisponivel"

MOTIVO_EXCLUSIVA: str = "Cidade Exclusiva (Consulte a Matriz)"
MOTIVO_LIMITE: str = "Limite populacional atingido"


@dataclass(frozen=True)
class ResultadoDisponibilidade:
    status: str
    max_revendedores: int
    revendedores_atuais: int
    vagas: int | None = None
    motivo: str | None = None

    @property
    def disponivel(self) -> bool:
        return self.status == DISPONIVEL

    @property
    def ocupacao(self) -> float:
        """Fração ocupada da praça (pode passar de 1.0)."""
        if self.max_revendedores <= 0:
            return 1.0 if self.revendedores_atuais > 0 else 0.0
        return self.revendedores_atuais / self.max_revendedores


def exclusividade_ativa(
    regra: RegraExclusividade | None, hoje: date | None = None
) -> bool:
    """Exclusividade sem data é permanente; com data, vale até o dia inclusive."""
    if regra is None:
        return False
    if regra.valido_ate is None:
        return True
    hoje = hoje or date.today()
    return regra.valido_ate >= hoje


def calcular_maximo(populacao: float, regra_densidade: float) -> int:
    """``floor(populacao / regra_densidade)`` com validação das entradas.

    Raises:
        ValueError: Regra de densidade não positiva ou população negativa.
    """
    if isinstance(regra_densidade, bool) or not isinstance(regra_densidade, Real):
        raise ValueError(f"Regra de densidade deve ser numérica: {regra_densidade!r}")
    if not regra_densidade > 0 or math.isinf(regra_densidade):
        raise ValueError(f"Regra de densidade deve ser positiva: {regra_densidade!r}")
    if isinstance(populacao, bool) or not isinstance(populacao, Real) or populacao < 0:
        raise ValueError(f"População inválida: {populacao!r}")
    return math.floor(populacao / regra_densidade)


def avaliar(
    populacao: float,
    revendedores_atuais: int,
    regra_densidade: float,
    exclusividade: RegraExclusividade | None = None,
    hoje: date | None = None,
) -> ResultadoDisponibilidade:
    """Classifica a praça.

    Args:
        populacao:           População estimada (o fallback 50000 é aceito
                             como qualquer outro valor).
        revendedores_atuais: Revendedores já instalados (inteiro >= 0).
        regra_densidade:     Habitantes por revendedor permitido (> 0).
        exclusividade:       Regra da cidade, se houver.
        hoje:                Data de referência (padrão: ``date.today()``).

    Returns:
        :class:`ResultadoDisponibilidade`. ``max_revendedores`` é preenchido
        em todos os casos; ``vagas`` só quando disponível; ``motivo`` só
        quando indisponível.

    Raises:
        ValueError: Entradas fora do domínio.
    """
    if (
        isinstance(revendedores_atuais, bool)
        or not isinstance(revendedores_atuais, int)
        or revendedores_atuais < 0
    ):
        raise ValueError(
            f"Revendedores atuais deve ser inteiro >= 0: {revendedores_atuais!r}"
        )

    maximo = calcular_maximo(populacao, regra_densidade)

    if revendedores_atuais > 0 and exclusividade_ativa(exclusividade, hoje):
        return ResultadoDisponibilidade(
            status=INDISPONIVEL,
            max_revendedores=maximo,
            revendedores_atuais=revendedores_atuais,
            motivo=MOTIVO_EXCLUSIVA,
        )

    vagas = maximo - revendedores_atuais
    if vagas > 0:
        return ResultadoDisponibilidade(
            status=DISPONIVEL,
            max_revendedores=maximo,
            revendedores_atuais=revendedores_atuais,
            vagas=vagas,
        )
    return ResultadoDisponibilidade(
        status=INDISPONIVEL,
        max_revendedores=maximo,
        revendedores_atuais=revendedores_atuais,
        motivo=MOTIVO_LIMITE,
    )
