"""
Sessão: dona única da configuração, com ciclo explícito abrir/salvar.

Toda ação do administrador valida a entrada, altera a configuração e regrava
o documento imediatamente; a consulta do usuário lê a configuração vigente e
delega a classificação a :func:`revenda.disponibilidade.avaliar`.
"""

import logging
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Callable

from revenda.alertas import AlertaExclusividade, alertas_vencimento, renovar
from revenda.config import CONFIG_JSON, DIAS_RENOVACAO
from revenda.configuracao import (
    Configuracao,
    carregar_configuracao,
    salvar_configuracao,
    validar_densidade,
    validar_dias,
)
from revenda.disponibilidade import ResultadoDisponibilidade, avaliar
from revenda.localizacao import LocalSelecionado
from revenda.populacao import obter_populacao
from revenda.registro import (
    RegistroOcupacao,
    RegraExclusividade,
    validar_municipio,
    validar_revendedores,
)

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Consulta:
    """Resultado de uma consulta: local (com população) + classificação."""

    local: LocalSelecionado
    resultado: ResultadoDisponibilidade

    @property
    def populacao(self) -> int:
        return self.local.populacao or 0


class Sessao:
    def __init__(
        self, configuracao: Configuracao | None = None, caminho: Path = CONFIG_JSON
    ) -> None:
        self.configuracao = configuracao or Configuracao()
        self.caminho = caminho

    @classmethod
    def abrir(cls, caminho: Path = CONFIG_JSON) -> "Sessao":
        return cls(carregar_configuracao(caminho), caminho)

    def salvar(self) -> Path:
        return salvar_configuracao(self.configuracao, self.caminho)

    # -----------------------------------------------------------------------
    # Consulta do usuário
    # -----------------------------------------------------------------------

    def consultar(
        self,
        local: LocalSelecionado,
        revendedores: int | None = None,
        hoje: date | None = None,
        provedor_populacao: Callable[[str], int] = obter_populacao,
    ) -> Consulta:
        """Avalia a disponibilidade de *local*.

        Args:
            local:              Local resolvido (CEP ou nome).
            revendedores:       Sobrescreve a contagem do registro; ``None``
                                usa o registro (ausente = 0).
            hoje:               Data de referência da exclusividade.
            provedor_populacao: Função código IBGE → população.
        """
        cfg = self.configuracao
        if revendedores is None:
            atuais = cfg.ocupadas.revendedores_em(local.cidade, local.uf)
        else:
            atuais = validar_revendedores(revendedores)

        populacao = provedor_populacao(local.codigo_ibge)
        resultado = avaliar(
            populacao=populacao,
            revendedores_atuais=atuais,
            regra_densidade=cfg.regra_densidade,
            exclusividade=cfg.exclusivas.encontrar(local.cidade, local.uf),
            hoje=hoje,
        )
        log.info(
            "Consulta %s: %s (max=%d, atuais=%d)",
            local.rotulo,
            resultado.status,
            resultado.max_revendedores,
            atuais,
        )
        return Consulta(local.com_populacao(populacao), resultado)

    # -----------------------------------------------------------------------
    # Ações do administrador
    # -----------------------------------------------------------------------

    def definir_densidade(self, valor: object) -> float:
        self.configuracao.regra_densidade = validar_densidade(valor)
        self.salvar()
        return self.configuracao.regra_densidade

    def definir_dias_aviso(self, valor: object) -> int:
        self.configuracao.dias_aviso = validar_dias(valor)
        self.salvar()
        return self.configuracao.dias_aviso

    def definir_limite_minimo_exibicao(self, valor: object) -> int:
        self.configuracao.limite_minimo_exibicao = validar_dias(valor)
        self.salvar()
        return self.configuracao.limite_minimo_exibicao

    def registrar_ocupacao(
        self,
        cidade: str,
        uf: str,
        revendedores: object,
        valido_ate: date | None = None,
    ) -> RegistroOcupacao:
        registro = self.configuracao.ocupadas.registrar(
            cidade, uf, revendedores, valido_ate
        )
        self.salvar()
        return registro

    def remover_ocupacao(self, cidade: str, uf: str) -> RegistroOcupacao:
        registro = self.configuracao.ocupadas.remover(cidade, uf)
        self.salvar()
        return registro

    def adicionar_exclusividade(
        self, cidade: str, uf: str, valido_ate: date | None = None
    ) -> RegraExclusividade:
        regra = self.configuracao.exclusivas.adicionar(cidade, uf, valido_ate)
        self.salvar()
        return regra

    def remover_exclusividade(self, cidade: str, uf: str) -> RegraExclusividade:
        regra = self.configuracao.exclusivas.remover(cidade, uf)
        self.salvar()
        return regra

    def renovar_exclusividade(
        self, cidade: str, uf: str, dias: int = DIAS_RENOVACAO
    ) -> RegraExclusividade:
        """Renova a exclusividade da cidade em *dias*.

        Raises:
            KeyError: Cidade sem exclusividade.
            ValueError: Exclusividade permanente.
        """
        cidade, uf = validar_municipio(cidade, uf)
        atual = self.configuracao.exclusivas.encontrar(cidade, uf)
        if atual is None:
            raise KeyError(f"{cidade} - {uf}")
        nova = self.configuracao.exclusivas.substituir(renovar(atual, dias))
        self.salvar()
        log.info("Renovado para %s! Nova data: %s", nova.cidade, nova.valido_ate)
        return nova

    def alertas(self, hoje: date | None = None) -> list[AlertaExclusividade]:
        return alertas_vencimento(
            self.configuracao.exclusivas, self.configuracao.dias_aviso, hoje=hoje
        )
