"""
conftest.py: Fixtures e configurações globais para os testes.

Aplicado automaticamente a todos os módulos de teste (autouse=True):
- tqdm substituído por iteração direta (sem saída de progresso nos testes).
"""

from pathlib import Path

import pytest

from revenda.sessao import Sessao


@pytest.fixture(autouse=True)
def desabilitar_tqdm(monkeypatch: pytest.MonkeyPatch) -> None:
    """Substitui tqdm por passthrough para suprimir barras de progresso."""
    monkeypatch.setattr(
        "revenda.localizacao.tqdm",
        lambda iterable, **kw: iterable,
    )


@pytest.fixture
def config_path(tmp_path: Path) -> Path:
    return tmp_path / "configuracao.json"


@pytest.fixture
def sessao(config_path: Path) -> Sessao:
    """Sessão vazia gravando em diretório temporário."""
    return Sessao.abrir(config_path)
