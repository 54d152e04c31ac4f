"""
Testes para revenda.registro.

Cobre:
- encontrar: lookup normalizado (acentos, caixa, espaços) por cidade e UF
- revendedores_em: cidade ausente conta como 0
- registrar: upsert preserva coordenadas e não duplica
- validação: cidade/UF vazias, UF desconhecida, contagem negativa ou não numérica
- remover: KeyError para cidade ausente
- ler_data: ISO, DD/MM/AAAA e vazio
"""

from datetime import date

import pytest

from revenda.registro import (
    RegistroOcupacao,
    RegistroOcupacoes,
    RegrasExclusividade,
    ler_data,
    validar_revendedores,
)


class TestEncontrar:
    def test_lookup_normalizado(self) -> None:
        registro = RegistroOcupacoes([RegistroOcupacao("São Gonçalo", "RJ", 4)])
        for cidade, uf in [
            ("São Gonçalo", "RJ"),
            ("sao goncalo", "rj"),
            ("  SÃO   GONÇALO ", " Rj "),
        ]:
            encontrado = registro.encontrar(cidade, uf)
            assert encontrado is not None
            assert encontrado.revendedores == 4

    def test_uf_distingue_homonimos(self) -> None:
        registro = RegistroOcupacoes(
            [RegistroOcupacao("Bom Jesus", "PI", 1), RegistroOcupacao("Bom Jesus", "RS", 7)]
        )
        assert registro.revendedores_em("Bom Jesus", "RS") == 7
        assert registro.revendedores_em("Bom Jesus", "PI") == 1

    def test_ausente_conta_zero(self) -> None:
        registro = RegistroOcupacoes()
        assert registro.encontrar("Niterói", "RJ") is None
        assert registro.revendedores_em("Niterói", "RJ") == 0

    def test_contains(self) -> None:
        registro = RegistroOcupacoes([RegistroOcupacao("Niterói", "RJ", 1)])
        assert ("niteroi", "RJ") in registro
        assert ("Niterói", "SP") not in registro
        assert "Niterói" not in registro


class TestRegistrar:
    def test_upsert_nao_duplica_e_preserva_coordenadas(self) -> None:
        registro = RegistroOcupacoes(
            [RegistroOcupacao("Niterói", "RJ", 2, lat=-22.88, lon=-43.10)]
        )
        atualizado = registro.registrar("niteroi", "rj", 5)
        assert len(registro) == 1
        assert atualizado.revendedores == 5
        assert atualizado.cidade == "Niterói"
        assert (atualizado.lat, atualizado.lon) == (-22.88, -43.10)

    def test_novo_registro_limpa_campos(self) -> None:
        registro = RegistroOcupacoes()
        novo = registro.registrar("  Maricá ", "rj", "3", date(2027, 1, 1))
        assert (novo.cidade, novo.uf, novo.revendedores) == ("Maricá", "RJ", 3)
        assert novo.valido_ate == date(2027, 1, 1)

    @pytest.mark.parametrize(
        "cidade, uf, n",
        [("", "RJ", 1), ("Niterói", "", 1), ("Niterói", "XX", 1), ("Niterói", "RJ", -1)],
    )
    def test_campos_invalidos(self, cidade: str, uf: str, n: int) -> None:
        with pytest.raises(ValueError):
            RegistroOcupacoes().registrar(cidade, uf, n)


def test_remover_ausente_levanta_keyerror() -> None:
    with pytest.raises(KeyError):
        RegistroOcupacoes().remover("Niterói", "RJ")


def test_remover_retorna_item() -> None:
    regras = RegrasExclusividade()
    regras.adicionar("Niterói", "RJ")
    removida = regras.remover("NITERÓI", "rj")
    assert removida.cidade == "Niterói"
    assert len(regras) == 0


@pytest.mark.parametrize("valor", ["abc", "1.5", True, None])
def test_validar_revendedores_rejeita(valor: object) -> None:
    with pytest.raises(ValueError):
        validar_revendedores(valor)


class TestLerData:
    def test_iso(self) -> None:
        assert ler_data("2026-12-31") == date(2026, 12, 31)

    def test_brasileiro(self) -> None:
        assert ler_data("31/12/2026") == date(2026, 12, 31)

    @pytest.mark.parametrize("valor", [None, "", "  "])
    def test_vazio(self, valor: object) -> None:
        assert ler_data(valor) is None

    def test_invalida(self) -> None:
        with pytest.raises(ValueError):
            ler_data("31-31-2026")


def test_dict_ida_e_volta_de_registro() -> None:
    original = RegistroOcupacao("Niterói", "RJ", 3, date(2026, 12, 31), -22.88, -43.1)
    assert RegistroOcupacao.from_dict(original.to_dict()) == original
