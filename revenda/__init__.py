"""
Pacote Revenda: verificador de disponibilidade de praças para revendedores.

Módulos disponíveis:

- ``revenda.config``         : constantes e caminhos centralizados
- ``revenda.texto``          : normalização de nomes (acentos, caixa)
- ``revenda.fontes``         : cadeia de fontes priorizadas com tentativas
- ``revenda.localizacao``    : CEP (ViaCEP), lista de municípios, Nominatim
- ``revenda.populacao``      : estimativa de população do IBGE
- ``revenda.registro``       : registro de ocupação e exclusividades
- ``revenda.disponibilidade``: motor de disponibilidade
- ``revenda.alertas``        : vencimento e renovação de exclusividades
- ``revenda.configuracao``   : documento JSON do administrador
- ``revenda.sessao``         : sessão: consulta e ações do administrador
- ``revenda.apresentacao``   : cartão de resultado e mapa Folium
- ``revenda.cli``            : CLI unificada
"""

__version__ = "0.1.0"
