"""
Camada de apresentação: cartão de resultado em texto e mapa Folium.

O mapa mostra a praça consultada (verde = disponível, vermelho =
indisponível), as cidades ocupadas com coordenadas em cache e um painel
flutuante com um medidor de ocupação da praça.
"""

import html
import logging
from pathlib import Path
from typing import Iterable

import folium
from branca.element import Element

from revenda.config import CENTRO_BRASIL, OUTPUT_HTML
from revenda.registro import RegistroOcupacao
from revenda.sessao import Consulta

log = logging.getLogger(__name__)

_COR_DISPONIVEL: str = "#16a34a"
_COR_INDISPONIVEL: str = "#dc2626"
_COR_OCUPADA: str = "#2563eb"

# ===========================================================================
# Template HTML/CSS do medidor
#
# Placeholders __X__ são substituídos em _construir_painel(). Não usar
# f-string neste bloco para evitar escape de chaves de CSS.
# ===========================================================================
_PAINEL_TEMPLATE: str = """\
<!-- ===== Revenda: medidor de ocupação ===== -->
<style>
#rv-panel {
  position: absolute; top: 10px; right: 10px; z-index: 1001;
  background: rgba(255,255,255,.97); border-radius: 8px;
  padding: 14px 16px; box-shadow: 0 2px 10px rgba(0,0,0,.25);
  font-family: Arial, sans-serif; font-size: 13px; min-width: 220px;
}
#rv-panel h3 {
  margin: 0 0 6px; font-size: 15px; color: __COR__;
}
#rv-panel .rv-local { color: #444; margin-bottom: 10px; }
#rv-gauge {
  height: 14px; background: #e5e7eb; border-radius: 7px; overflow: hidden;
}
#rv-gauge div { height: 100%; width: __PCT__%; background: __COR__; }
.rv-row { display: flex; justify-content: space-between; margin: 5px 0; }
.rv-l { color: #6b7280; font-size: 11px; }
.rv-v { font-weight: 700; color: #1e3a5f; }
</style>
<div id="rv-panel">
  <h3>__TITULO__</h3>
  <div class="rv-local">__LOCAL__</div>
  <div id="rv-gauge"><div></div></div>
  <div class="rv-row"><span class="rv-l">Ocupação:</span><span class="rv-v">__OCUPACAO__</span></div>
  <div class="rv-row"><span class="rv-l">População Estimada:</span><span class="rv-v">__POPULACAO__</span></div>
  <div class="rv-row"><span class="rv-l">__ROTULO_EXTRA__:</span><span class="rv-v">__VALOR_EXTRA__</span></div>
</div>
"""


def formatar_numero(n: int | float) -> str:
    """Separador de milhar pt-BR: ``1234567`` → ``"1.234.567"``."""
    return f"{int(n):,}".replace(",", ".")


def limite_exibido(max_revendedores: int, limite_minimo: int = 0) -> int:
    """Limite da praça para exibição, com piso opcional."""
    return max(max_revendedores, limite_minimo)


def _linha_extra(consulta: Consulta, limite_minimo: int) -> tuple[str, str]:
    res = consulta.resultado
    if res.disponivel:
        return "Vagas Abertas", f"+{res.vagas}"
    return "Limite da Praça", str(limite_exibido(res.max_revendedores, limite_minimo))


def formatar_resultado(consulta: Consulta, limite_minimo_exibicao: int = 0) -> str:
    """Cartão de resultado em texto para o terminal."""
    res = consulta.resultado
    rotulo, valor = _linha_extra(consulta, limite_minimo_exibicao)
    if res.disponivel:
        cabecalho = ["Disponível", "Esta praça comporta mais revendedores."]
    else:
        cabecalho = ["Indisponível", res.motivo or ""]
    linhas = [
        *cabecalho,
        "",
        f"  {'Praça':<20} {consulta.local.rotulo}",
        f"  {'População Estimada':<20} {formatar_numero(consulta.populacao)}",
        f"  {rotulo:<20} {valor}",
    ]
    return "\n".join(linhas)


def _construir_painel(consulta: Consulta, limite_minimo: int) -> str:
    res = consulta.resultado
    pct = min(res.ocupacao, 1.0) * 100
    rotulo, valor = _linha_extra(consulta, limite_minimo)
    substituicoes = {
        "__COR__": _COR_DISPONIVEL if res.disponivel else _COR_INDISPONIVEL,
        "__PCT__": f"{pct:.0f}",
        "__TITULO__": "Disponível" if res.disponivel else "Indisponível",
        "__LOCAL__": html.escape(consulta.local.rotulo),
        "__OCUPACAO__": f"{res.revendedores_atuais}/{res.max_revendedores}",
        "__POPULACAO__": formatar_numero(consulta.populacao),
        "__ROTULO_EXTRA__": rotulo,
        "__VALOR_EXTRA__": valor,
    }
    painel = _PAINEL_TEMPLATE
    for chave, texto in substituicoes.items():
        painel = painel.replace(chave, texto)
    return painel


def gerar_mapa(
    consulta: Consulta,
    registros: Iterable[RegistroOcupacao] = (),
    output_path: Path = OUTPUT_HTML,
    coordenadas: tuple[float, float] | None = None,
    limite_minimo_exibicao: int = 0,
) -> Path:
    """Gera mapa HTML da consulta.

    Args:
        consulta:               Consulta avaliada.
        registros:              Cidades ocupadas; só as com ``lat``/``lon``
                                entram no mapa.
        output_path:            Arquivo HTML de saída (cria diretórios pai).
        coordenadas:            ``(lat, lon)`` da praça consultada. Se
                                ``None``, o mapa abre no centro do Brasil sem
                                marcador da praça.
        limite_minimo_exibicao: Piso do "Limite da Praça" exibido.

    Returns:
        Caminho do HTML gerado.
    """
    log.info("Gerando mapa da consulta...")
    output_path.parent.mkdir(parents=True, exist_ok=True)

    centro = coordenadas or CENTRO_BRASIL
    mapa = folium.Map(
        location=list(centro),
        zoom_start=10 if coordenadas else 4,
        tiles="CartoDB positron",
    )

    camada_ocupadas = folium.FeatureGroup(name="Cidades ocupadas")
    n_ocupadas = 0
    for reg in registros:
        if reg.lat is None or reg.lon is None:
            continue
        folium.CircleMarker(
            location=[reg.lat, reg.lon],
            radius=5,
            color=_COR_OCUPADA,
            fill=True,
            fill_opacity=0.5,
            tooltip=html.escape(
                f"{reg.cidade} - {reg.uf}: {reg.revendedores} revendedor(es)"
            ),
        ).add_to(camada_ocupadas)
        n_ocupadas += 1
    camada_ocupadas.add_to(mapa)
    log.info("  %d cidade(s) ocupada(s) no mapa", n_ocupadas)

    if coordenadas:
        res = consulta.resultado
        folium.CircleMarker(
            location=list(coordenadas),
            radius=12,
            color=_COR_DISPONIVEL if res.disponivel else _COR_INDISPONIVEL,
            fill=True,
            fill_opacity=0.7,
            popup=folium.Popup(
                html.escape(
                    formatar_resultado(consulta, limite_minimo_exibicao)
                ).replace("\n", "<br>"),
                max_width=300,
            ),
            tooltip=html.escape(consulta.local.rotulo),
        ).add_to(mapa)
    else:
        log.warning("  Praça sem coordenadas; marcador omitido.")

    folium.LayerControl().add_to(mapa)
    painel = _construir_painel(consulta, limite_minimo_exibicao)
    # branca.element.Figure tem atributo .html; get_root() retorna Figure
    mapa.get_root().html.add_child(Element(painel))  # type: ignore[union-attr]

    mapa.save(str(output_path))
    log.info("  Mapa salvo: %s", output_path)
    return output_path
