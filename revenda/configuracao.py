"""
Documento de configuração do administrador.

Um único JSON contém a regra de densidade, a antecedência dos alertas, o
limite mínimo de exibição e as listas de cidades ocupadas e exclusivas. O
documento é lido inteiro na abertura e regravado inteiro a cada alteração.

Formato::

    {
      "regra_densidade": 5000,
      "dias_aviso": 30,
      "limite_minimo_exibicao": 0,
      "cidades_ocupadas": [{"cidade": "...", "uf": "RJ", "revendedores": 3,
                            "valido_ate": null, "lat": null, "lon": null}],
      "cidades_exclusivas": [{"cidade": "...", "uf": "RJ",
                              "valido_ate": "2026-12-31"}]
    }
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path

from revenda.config import DIAS_AVISO_PADRAO, REGRA_DENSIDADE_PADRAO
from revenda.registro import (
    RegistroOcupacao,
    RegistroOcupacoes,
    RegraExclusividade,
    RegrasExclusividade,
)

log = logging.getLogger(__name__)


def validar_densidade(valor: object) -> float:
    """Regra de densidade: número positivo.

    Inteiros continuam inteiros no JSON (``5000`` e não ``5000.0``).
    """
    if isinstance(valor, bool):
        raise ValueError("Regra de densidade deve ser numérica.")
    try:
        numero = float(str(valor).strip().replace(",", "."))
    except ValueError as exc:
        raise ValueError(f"Regra de densidade deve ser numérica: {valor!r}") from exc
    if not numero > 0 or numero == float("inf"):
        raise ValueError("Regra de densidade deve ser positiva.")
    return int(numero) if numero.is_integer() else numero


def validar_dias(valor: object) -> int:
    """Antecedência dos alertas: inteiro >= 0."""
    try:
        dias = int(str(valor).strip())
    except ValueError as exc:
        raise ValueError(f"Dias de aviso deve ser inteiro: {valor!r}") from exc
    if dias < 0:
        raise ValueError("Dias de aviso não pode ser negativo.")
    return dias


def _lista(dados: dict, chave: str) -> list:
    valor = dados.get(chave)
    if valor is None:
        return []
    if not isinstance(valor, list):
        log.warning("  %s não é uma lista (%r). Usando lista vazia.", chave, valor)
        return []
    return valor


@dataclass
class Configuracao:
    regra_densidade: float = REGRA_DENSIDADE_PADRAO
    dias_aviso: int = DIAS_AVISO_PADRAO
    #: Valor mínimo exibido como "Limite da Praça" (0 = exibe o valor real)
    limite_minimo_exibicao: int = 0
    ocupadas: RegistroOcupacoes = field(default_factory=RegistroOcupacoes)
    exclusivas: RegrasExclusividade = field(default_factory=RegrasExclusividade)

    def to_dict(self) -> dict:
        return {
            "regra_densidade": self.regra_densidade,
            "dias_aviso": self.dias_aviso,
            "limite_minimo_exibicao": self.limite_minimo_exibicao,
            "cidades_ocupadas": [r.to_dict() for r in self.ocupadas],
            "cidades_exclusivas": [r.to_dict() for r in self.exclusivas],
        }

    @classmethod
    def from_dict(cls, dados: dict) -> "Configuracao":
        """Constrói a configuração validando cada campo.

        Registros individuais inválidos são descartados com aviso; campos
        escalares inválidos voltam ao padrão.
        """
        padrao = cls()

        try:
            densidade = validar_densidade(
                dados.get("regra_densidade", padrao.regra_densidade)
            )
        except ValueError as exc:
            log.warning("  regra_densidade inválida (%s). Usando padrão.", exc)
            densidade = padrao.regra_densidade

        try:
            dias = validar_dias(dados.get("dias_aviso", padrao.dias_aviso))
        except ValueError as exc:
            log.warning("  dias_aviso inválido (%s). Usando padrão.", exc)
            dias = padrao.dias_aviso

        try:
            minimo = validar_dias(dados.get("limite_minimo_exibicao", 0))
        except ValueError as exc:
            log.warning("  limite_minimo_exibicao inválido (%s). Usando 0.", exc)
            minimo = 0

        ocupadas: list[RegistroOcupacao] = []
        for item in _lista(dados, "cidades_ocupadas"):
            try:
                ocupadas.append(RegistroOcupacao.from_dict(item))
            except (ValueError, TypeError, AttributeError) as exc:
                log.warning("  Cidade ocupada ignorada (%s): %r", exc, item)

        exclusivas: list[RegraExclusividade] = []
        for item in _lista(dados, "cidades_exclusivas"):
            try:
                exclusivas.append(RegraExclusividade.from_dict(item))
            except (ValueError, TypeError, AttributeError) as exc:
                log.warning("  Exclusividade ignorada (%s): %r", exc, item)

        return cls(
            regra_densidade=densidade,
            dias_aviso=dias,
            limite_minimo_exibicao=minimo,
            ocupadas=RegistroOcupacoes(ocupadas),
            exclusivas=RegrasExclusividade(exclusivas),
        )


def carregar_configuracao(caminho: Path) -> Configuracao:
    """Lê o documento de *caminho*.

    Arquivo ausente → configuração padrão. Arquivo corrompido → aviso e
    configuração padrão (o arquivo não é tocado até o próximo salvamento).
    """
    if not caminho.exists():
        log.info("Configuração não encontrada em '%s'. Usando padrão.", caminho)
        return Configuracao()
    try:
        dados = json.loads(caminho.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        log.warning("Erro ao ler configuração (%s). Usando padrão.", exc)
        return Configuracao()
    if not isinstance(dados, dict):
        log.warning("Configuração com formato inesperado. Usando padrão.")
        return Configuracao()

    config = Configuracao.from_dict(dados)
    log.info(
        "Configuração carregada: densidade=%s, %d ocupada(s), %d exclusiva(s)",
        config.regra_densidade,
        len(config.ocupadas),
        len(config.exclusivas),
    )
    return config


def salvar_configuracao(config: Configuracao, caminho: Path) -> Path:
    """Regrava o documento inteiro em *caminho* (cria diretórios pai)."""
    caminho.parent.mkdir(parents=True, exist_ok=True)
    tmp = caminho.with_suffix(caminho.suffix + ".tmp")
    tmp.write_text(
        json.dumps(config.to_dict(), ensure_ascii=False, indent=2), encoding="utf-8"
    )
    tmp.replace(caminho)
    log.info("Configurações salvas: %s", caminho)
    return caminho
