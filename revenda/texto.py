"""
Normalização de nomes de municípios.

Uma única política vale para a busca por nome e para as chaves do registro de
ocupação: caixa dobrada, acentos removidos e espaços colapsados.
"""

import re
import unicodedata


def texto_limpo(valor: object) -> str:
    """Normaliza texto de entrada removendo nulos e espaços extras."""
    if valor is None:
        return ""
    texto = str(valor).strip()
    if texto.lower() in ("nan", "none"):
        return ""
    return re.sub(r"\s+", " ", texto)


def remover_acentos(texto: str) -> str:
    """Remove acentuação preservando caracteres ASCII básicos."""
    return "".join(
        c for c in unicodedata.normalize("NFKD", texto) if not unicodedata.combining(c)
    )


def normalizar_nome(nome: object) -> str:
    """Forma canônica de comparação: ``"São  João"`` → ``"sao joao"``."""
    return remover_acentos(texto_limpo(nome)).casefold()


def normalizar_uf(uf: object) -> str:
    return texto_limpo(uf).upper()


def chave_municipio(cidade: object, uf: object) -> tuple[str, str]:
    """Chave de lookup ``(cidade_normalizada, UF)``."""
    return (normalizar_nome(cidade), normalizar_uf(uf))
