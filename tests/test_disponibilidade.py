"""
Testes para revenda.disponibilidade.

Cobre:
- cenários de referência (100000/5000/15 disponível; 30000/5000/6 indisponível)
- max = floor(populacao / densidade) e nunca negativo
- atuais >= max → indisponível com motivo de limite
- exclusividade permanente, vencida, vencendo hoje (limite inclusivo)
- exclusividade com zero revendedores não bloqueia
- motivo de exclusividade não expõe a data de vencimento
- população de fallback (50000) avaliada normalmente
- entradas inválidas → ValueError
"""

from datetime import date, timedelta

import pytest

from revenda.config import POPULACAO_FALLBACK
from revenda.disponibilidade import (
    DISPONIVEL,
    INDISPONIVEL,
    MOTIVO_EXCLUSIVA,
    MOTIVO_LIMITE,
    avaliar,
    calcular_maximo,
    exclusividade_ativa,
)
from revenda.registro import RegraExclusividade

HOJE = date(2026, 10, 19)


def _regra(valido_ate: date | None = None) -> RegraExclusividade:
    return RegraExclusividade("Niterói", "RJ", valido_ate)


# ===========================================================================
# Cenários de referência
# ===========================================================================


def test_cenario_disponivel_com_cinco_vagas() -> None:
    """100000 hab, 1 por 5000, 15 atuais → max 20, 5 vagas."""
    res = avaliar(100000, 15, 5000)
    assert res.status == DISPONIVEL
    assert res.max_revendedores == 20
    assert res.vagas == 5
    assert res.motivo is None


def test_cenario_limite_atingido() -> None:
    """30000 hab, 1 por 5000, 6 atuais → max 6, indisponível."""
    res = avaliar(30000, 6, 5000)
    assert res.status == INDISPONIVEL
    assert res.max_revendedores == 6
    assert res.motivo == MOTIVO_LIMITE
    assert res.vagas is None


def test_populacao_fallback_avaliada_normalmente() -> None:
    """Fallback 50000 com densidade 5000 → max 10."""
    res = avaliar(POPULACAO_FALLBACK, 0, 5000)
    assert res.disponivel
    assert res.max_revendedores == 10
    assert res.vagas == 10


# ===========================================================================
# Propriedades do cálculo
# ===========================================================================


@pytest.mark.parametrize(
    "populacao, densidade, esperado",
    [
        (0, 5000, 0),
        (4999, 5000, 0),
        (5000, 5000, 1),
        (12345, 1000, 12),
        (10000, 2500.5, 3),
    ],
)
def test_calcular_maximo_e_piso(populacao: int, densidade: float, esperado: int) -> None:
    assert calcular_maximo(populacao, densidade) == esperado


@pytest.mark.parametrize("atuais", [20, 21, 50])
def test_atuais_maior_ou_igual_ao_maximo_indisponivel(atuais: int) -> None:
    res = avaliar(100000, atuais, 5000)
    assert res.status == INDISPONIVEL
    assert res.motivo == MOTIVO_LIMITE


def test_populacao_abaixo_da_densidade_sem_revendedores_indisponivel() -> None:
    """max = 0 e atuais = 0 → vagas 0 → indisponível."""
    res = avaliar(3000, 0, 5000)
    assert res.status == INDISPONIVEL
    assert res.max_revendedores == 0


def test_vagas_igual_max_menos_atuais() -> None:
    for atuais in range(0, 20):
        res = avaliar(100000, atuais, 5000)
        assert res.disponivel
        assert res.vagas == 20 - atuais > 0


# ===========================================================================
# Exclusividade
# ===========================================================================


class TestExclusividadeAtiva:
    def test_sem_regra(self) -> None:
        assert exclusividade_ativa(None, HOJE) is False

    def test_permanente_sempre_ativa(self) -> None:
        assert exclusividade_ativa(_regra(None), date(1990, 1, 1))
        assert exclusividade_ativa(_regra(None), date(2100, 1, 1))

    def test_vencida_ontem_inativa(self) -> None:
        assert not exclusividade_ativa(_regra(HOJE - timedelta(days=1)), HOJE)

    def test_vence_hoje_ainda_ativa(self) -> None:
        assert exclusividade_ativa(_regra(HOJE), HOJE)

    def test_futura_ativa(self) -> None:
        assert exclusividade_ativa(_regra(HOJE + timedelta(days=10)), HOJE)


def test_exclusividade_ativa_com_revendedor_bloqueia() -> None:
    """Mesmo com vagas pela densidade, exclusividade ativa bloqueia."""
    res = avaliar(100000, 1, 5000, exclusividade=_regra(None), hoje=HOJE)
    assert res.status == INDISPONIVEL
    assert res.motivo == MOTIVO_EXCLUSIVA
    assert res.vagas is None


def test_motivo_exclusividade_nao_expoe_data() -> None:
    vencimento = date(2026, 12, 31)
    res = avaliar(100000, 3, 5000, exclusividade=_regra(vencimento), hoje=HOJE)
    assert res.motivo == MOTIVO_EXCLUSIVA
    assert "2026" not in (res.motivo or "")
    assert "31/12" not in (res.motivo or "")


def test_exclusividade_sem_revendedores_segue_densidade() -> None:
    res = avaliar(100000, 0, 5000, exclusividade=_regra(None), hoje=HOJE)
    assert res.status == DISPONIVEL
    assert res.vagas == 20


def test_exclusividade_vencida_cai_na_densidade() -> None:
    """Vencida ontem com 3 revendedores → regra de densidade decide."""
    ontem = HOJE - timedelta(days=1)
    res = avaliar(100000, 3, 5000, exclusividade=_regra(ontem), hoje=HOJE)
    assert res.status == DISPONIVEL
    assert res.vagas == 17


# ===========================================================================
# Entradas inválidas
# ===========================================================================


@pytest.mark.parametrize("densidade", [0, -5000, float("nan"), "5000", None, True])
def test_densidade_invalida(densidade: object) -> None:
    with pytest.raises(ValueError):
        avaliar(100000, 0, densidade)  # type: ignore[arg-type]


@pytest.mark.parametrize("atuais", [-1, 1.5, "3", None])
def test_revendedores_invalidos(atuais: object) -> None:
    with pytest.raises(ValueError):
        avaliar(100000, atuais, 5000)  # type: ignore[arg-type]


def test_populacao_negativa() -> None:
    with pytest.raises(ValueError):
        avaliar(-1, 0, 5000)


def test_ocupacao_fracao() -> None:
    assert avaliar(100000, 15, 5000).ocupacao == pytest.approx(0.75)
    assert avaliar(3000, 0, 5000).ocupacao == 0.0
