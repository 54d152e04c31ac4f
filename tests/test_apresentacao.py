"""
Testes para revenda.apresentacao.

Cobre:
- formatar_numero: separador de milhar pt-BR
- formatar_resultado: cartão disponível (Vagas Abertas) e indisponível (Limite)
- limite_minimo_exibicao: piso só na exibição, nunca no resultado
- gerar_mapa: HTML com painel do medidor, com e sem coordenadas da praça
- gerar_mapa: nomes de cidade com < e & são escapados
"""

from datetime import date
from pathlib import Path

import pytest

from revenda.apresentacao import formatar_numero, formatar_resultado, gerar_mapa, limite_exibido
from revenda.disponibilidade import MOTIVO_EXCLUSIVA, MOTIVO_LIMITE, avaliar
from revenda.localizacao import LocalSelecionado
from revenda.registro import RegistroOcupacao, RegraExclusividade
from revenda.sessao import Consulta


def _consulta(populacao: int, atuais: int, **kwargs) -> Consulta:  # type: ignore[no-untyped-def]
    local = LocalSelecionado("Niterói", "RJ", "3303302").com_populacao(populacao)
    resultado = avaliar(populacao, atuais, 5000, **kwargs)
    return Consulta(local, resultado)


@pytest.mark.parametrize(
    "n, esperado",
    [(0, "0"), (999, "999"), (1000, "1.000"), (1234567, "1.234.567"), (50000.0, "50.000")],
)
def test_formatar_numero(n: float, esperado: str) -> None:
    assert formatar_numero(n) == esperado


def test_limite_exibido() -> None:
    assert limite_exibido(2, 5) == 5
    assert limite_exibido(8, 5) == 8
    assert limite_exibido(2) == 2


class TestFormatarResultado:
    def test_disponivel(self) -> None:
        texto = formatar_resultado(_consulta(100000, 15))
        linhas = texto.splitlines()
        assert linhas[0] == "Disponível"
        assert "Niterói - RJ" in texto
        assert "100.000" in texto
        assert "Vagas Abertas" in texto
        assert "+5" in texto

    def test_indisponivel_por_limite(self) -> None:
        texto = formatar_resultado(_consulta(30000, 6))
        assert texto.splitlines()[0] == "Indisponível"
        assert MOTIVO_LIMITE in texto
        assert "Limite da Praça" in texto
        assert texto.rstrip().endswith("6")

    def test_exclusiva_nao_expoe_data(self) -> None:
        regra = RegraExclusividade("Niterói", "RJ", date(2026, 12, 31))
        texto = formatar_resultado(
            _consulta(100000, 1, exclusividade=regra, hoje=date(2026, 10, 19))
        )
        assert MOTIVO_EXCLUSIVA in texto
        assert "2026" not in texto
        assert "31/12" not in texto

    def test_piso_de_exibicao(self) -> None:
        consulta = _consulta(12000, 3)
        assert consulta.resultado.max_revendedores == 2
        texto = formatar_resultado(consulta, limite_minimo_exibicao=5)
        assert texto.rstrip().endswith("5")
        assert consulta.resultado.max_revendedores == 2


class TestGerarMapa:
    def test_gera_html_com_painel(self, tmp_path: Path) -> None:
        saida = tmp_path / "mapa" / "consulta.html"
        registros = [
            RegistroOcupacao("Maricá", "RJ", 2, lat=-22.92, lon=-42.82),
            RegistroOcupacao("Sem Coordenada", "RJ", 1),
        ]
        caminho = gerar_mapa(
            _consulta(100000, 15),
            registros,
            output_path=saida,
            coordenadas=(-22.88, -43.10),
        )
        assert caminho == saida
        html = saida.read_text(encoding="utf-8")
        assert "rv-panel" in html
        assert "Niterói - RJ" in html
        assert "15/20" in html
        assert "2 revendedor(es)" in html
        assert "Sem Coordenada" not in html

    def test_sem_coordenadas(self, tmp_path: Path) -> None:
        saida = tmp_path / "consulta.html"
        gerar_mapa(_consulta(30000, 6), output_path=saida)
        html = saida.read_text(encoding="utf-8")
        assert "rv-panel" in html
        assert "Indisponível" in html

    def test_nomes_sao_escapados_no_html(self, tmp_path: Path) -> None:
        saida = tmp_path / "consulta.html"
        local = LocalSelecionado("Vila <b>&", "RJ", "1").com_populacao(30000)
        consulta = Consulta(local, avaliar(30000, 1, 5000))
        registros = [RegistroOcupacao("Sítio <i>", "RJ", 1, lat=-22.9, lon=-43.1)]
        gerar_mapa(consulta, registros, output_path=saida, coordenadas=(-22.88, -43.10))
        html = saida.read_text(encoding="utf-8")
        assert "Vila &lt;b&gt;&amp; - RJ" in html
        assert "Vila <b>&" not in html
        assert "Sítio <i>" not in html
