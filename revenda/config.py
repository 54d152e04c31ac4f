"""
Constantes e caminhos centralizados para o pacote Revenda.

Todas as demais camadas devem importar daqui; nunca definir constantes
localmente para evitar divergências.
"""

from pathlib import Path

# ===========================================================================
# Caminhos
# ===========================================================================

#: Diretório de dados locais (não commitado, ver .gitignore)
DATA_DIR: Path = Path("data/revenda")

#: Documento único de configuração do administrador
CONFIG_JSON: Path = DATA_DIR / "configuracao.json"

#: Cache local da lista de municípios do IBGE
MUNICIPIOS_CSV: Path = DATA_DIR / "municipios.csv"

#: Mapa gerado pela consulta
OUTPUT_HTML: Path = DATA_DIR / "consulta.html"

# ===========================================================================
# URLs e HTTP
# ===========================================================================

#: ViaCEP: retorna localidade, UF e código IBGE de um CEP
VIACEP_URL: str = "https://viacep.com.br/ws/{cep}/json/"

#: IBGE: Agregado 6579 (estimativa de população), variável 9324,
#: último período (-1), nível município (N6)
IBGE_POPULACAO_URL: str = (
    "https://servicodados.ibge.gov.br/api/v3/agregados/6579/periodos/-1"
    "/variaveis/9324?localidades=N6[{codigo}]"
)

#: IBGE: lista completa de municípios
IBGE_MUNICIPIOS_URL: str = (
    "https://servicodados.ibge.gov.br/api/v1/localidades/municipios"
)

#: Timeout padrão das chamadas HTTP (segundos)
HTTP_TIMEOUT: float = 15

#: Headers HTTP: identificação obrigatória pelo ToS do Nominatim
HEADERS: dict[str, str] = {
    "User-Agent": "RevendaPracas/1.0 (verificador-de-disponibilidade)",
    "Accept-Language": "pt-BR,pt;q=0.9",
}

#: Tentativas e pausa fixa da carga da lista de municípios
TENTATIVAS_MUNICIPIOS: int = 3
PAUSA_TENTATIVAS: float = 1.0

# ===========================================================================
# Geocodificação (Nominatim / OpenStreetMap)
# ===========================================================================

#: User-Agent identificador para o Nominatim (ToS exige string descritiva)
NOMINATIM_USER_AGENT: str = "RevendaPracas/1.0 (verificador-de-disponibilidade)"

#: Delay mínimo entre chamadas ao Nominatim (1 req/s conforme ToS)
NOMINATIM_DELAY: float = 1.1

#: Centro aproximado do Brasil: enquadramento padrão do mapa
CENTRO_BRASIL: tuple[float, float] = (-14.235, -51.9253)

# ===========================================================================
# Regras de negócio
# ===========================================================================

#: População assumida quando o IBGE não responde ou responde mal
POPULACAO_FALLBACK: int = 50000

#: Habitantes por revendedor permitido
REGRA_DENSIDADE_PADRAO: float = 5000

#: Antecedência (dias) dos alertas de vencimento de exclusividade
DIAS_AVISO_PADRAO: int = 30

#: Dias acrescentados por renovação de exclusividade
DIAS_RENOVACAO: int = 30

#: Siglas das 27 unidades federativas
UFS: tuple[str, ...] = (
    "AC", "AL", "AP", "AM", "BA", "CE", "DF", "ES", "GO", "MA", "MT", "MS",
    "MG", "PA", "PB", "PR", "PE", "PI", "RJ", "RN", "RS", "RO", "RR", "SC",
    "SP", "SE", "TO",
)

#: Fallback hardcoded usado quando cache local e API do IBGE falham:
#: capitais estaduais ``(codigo_ibge, nome, uf)``
MUNICIPIOS_FALLBACK: tuple[tuple[int, str, str], ...] = (
    (1200401, "Rio Branco", "AC"),
    (2704302, "Maceió", "AL"),
    (1600303, "Macapá", "AP"),
    (1302603, "Manaus", "AM"),
    (2927408, "Salvador", "BA"),
    (2304400, "Fortaleza", "CE"),
    (5300108, "Brasília", "DF"),
    (3205309, "Vitória", "ES"),
    (5208707, "Goiânia", "GO"),
    (2111300, "São Luís", "MA"),
    (5103403, "Cuiabá", "MT"),
    (5002704, "Campo Grande", "MS"),
    (3106200, "Belo Horizonte", "MG"),
    (1501402, "Belém", "PA"),
    (2507507, "João Pessoa", "PB"),
    (4106902, "Curitiba", "PR"),
    (2611606, "Recife", "PE"),
    (2211001, "Teresina", "PI"),
    (3304557, "Rio de Janeiro", "RJ"),
    (2408102, "Natal", "RN"),
    (4314902, "Porto Alegre", "RS"),
    (1100205, "Porto Velho", "RO"),
    (1400100, "Boa Vista", "RR"),
    (4205407, "Florianópolis", "SC"),
    (3550308, "São Paulo", "SP"),
    (2800308, "Aracaju", "SE"),
    (1721000, "Palmas", "TO"),
)
