"""
CLI unificado do verificador de praças.

Subcomandos disponíveis::

    revenda consultar  (--cep CEP | --cidade NOME --uf UF)
                       [--revendedores N] [--mapa PATH] [--sem-coordenadas]
    revenda municipios TERMO [--limite N]
    revenda densidade  [VALOR]
    revenda aviso      [DIAS]
    revenda exibicao   [MINIMO]
    revenda ocupacao   listar | registrar CIDADE UF N [--ate DATA]
                       | remover CIDADE UF | geocodificar
    revenda exclusiva  listar | adicionar CIDADE UF [--ate DATA]
                       | remover CIDADE UF | renovar CIDADE UF [--dias N]
    revenda alertas
    revenda status
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Callable

from revenda.config import CONFIG_JSON, DIAS_RENOVACAO, MUNICIPIOS_CSV, OUTPUT_HTML

log = logging.getLogger(__name__)


# ===========================================================================
# Logging
# ===========================================================================


def _setup_logging(verbose: bool = False) -> None:
    """Configura logging da CLI."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def _abrir_sessao(args: argparse.Namespace):  # type: ignore[no-untyped-def]
    from revenda.sessao import Sessao

    caminho = Path(args.config) if getattr(args, "config", None) else CONFIG_JSON
    return Sessao.abrir(caminho)


def _data_arg(valor: str):  # type: ignore[no-untyped-def]
    """Tipo argparse para datas ``AAAA-MM-DD`` ou ``DD/MM/AAAA``."""
    from revenda.registro import ler_data

    try:
        return ler_data(valor)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"data inválida: {valor!r}") from exc


# ===========================================================================
# Subcomando: consultar
# ===========================================================================


def cmd_consultar(args: argparse.Namespace) -> int:
    """Resolve o local, busca a população e avalia a disponibilidade."""
    from revenda.apresentacao import formatar_resultado, gerar_mapa
    from revenda.localizacao import (
        buscar_cep,
        carregar_municipios,
        geocodificar_municipio,
        resolver_nome,
    )

    sessao = _abrir_sessao(args)
    cfg = sessao.configuracao

    try:
        if args.cep:
            local = buscar_cep(args.cep)
        else:
            local = resolver_nome(args.cidade or "", args.uf or "", carregar_municipios())
        consulta = sessao.consultar(local, revendedores=args.revendedores)
    except (ValueError, LookupError, RuntimeError) as e:
        log.error("%s", e)
        return 1

    print()
    print(formatar_resultado(consulta, cfg.limite_minimo_exibicao))
    print()

    if args.mapa:
        coords = None
        if not args.sem_coordenadas:
            registro = cfg.ocupadas.encontrar(local.cidade, local.uf)
            if registro is not None and registro.lat is not None and registro.lon is not None:
                coords = (registro.lat, registro.lon)
            else:
                coords = geocodificar_municipio(local.cidade, local.uf)
        saida = gerar_mapa(
            consulta,
            cfg.ocupadas.listar(),
            output_path=Path(args.mapa),
            coordenadas=coords,
            limite_minimo_exibicao=cfg.limite_minimo_exibicao,
        )
        print(f"Mapa gerado: {saida}")
    return 0


# ===========================================================================
# Subcomando: municipios
# ===========================================================================


def cmd_municipios(args: argparse.Namespace) -> int:
    """Autocomplete de municípios por nome."""
    from revenda.localizacao import buscar_por_nome, carregar_municipios

    try:
        encontrados = buscar_por_nome(args.termo, carregar_municipios(), limite=args.limite)
    except ValueError as e:
        log.error("%s", e)
        return 1

    if not encontrados:
        print("Nenhum município encontrado.")
        return 0
    print(f"\n{'IBGE':<8}  {'UF':<3} Município")
    print("-" * 50)
    for m in encontrados:
        print(f"{m.codigo_ibge:<8}  {m.uf:<3} {m.nome}")
    return 0


# ===========================================================================
# Subcomandos escalares: densidade, aviso, exibicao
# ===========================================================================


def _cmd_escalar(
    args: argparse.Namespace, atributo: str, definir: str, rotulo: str
) -> int:
    sessao = _abrir_sessao(args)
    if args.valor is None:
        print(f"{rotulo}: {getattr(sessao.configuracao, atributo)}")
        return 0
    try:
        novo = getattr(sessao, definir)(args.valor)
    except ValueError as e:
        log.error("%s", e)
        return 1
    print(f"{rotulo} salvo: {novo}")
    return 0


def cmd_densidade(args: argparse.Namespace) -> int:
    """Exibe ou altera a regra de densidade (habitantes por revendedor)."""
    return _cmd_escalar(args, "regra_densidade", "definir_densidade", "Regra de densidade")


def cmd_aviso(args: argparse.Namespace) -> int:
    """Exibe ou altera a antecedência dos alertas de vencimento."""
    return _cmd_escalar(args, "dias_aviso", "definir_dias_aviso", "Dias de aviso")


def cmd_exibicao(args: argparse.Namespace) -> int:
    """Exibe ou altera o piso do "Limite da Praça" exibido."""
    return _cmd_escalar(
        args,
        "limite_minimo_exibicao",
        "definir_limite_minimo_exibicao",
        "Limite mínimo de exibição",
    )


# ===========================================================================
# Subcomando: ocupacao
# ===========================================================================


def cmd_ocupacao(args: argparse.Namespace) -> int:
    """CRUD do registro de ocupação."""
    import pandas as pd

    sessao = _abrir_sessao(args)
    ocupadas = sessao.configuracao.ocupadas

    try:
        if args.acao == "registrar":
            reg = sessao.registrar_ocupacao(args.cidade, args.uf, args.revendedores, args.ate)
            print(f"Registrado: {reg.cidade} - {reg.uf} ({reg.revendedores})")
        elif args.acao == "remover":
            reg = sessao.remover_ocupacao(args.cidade, args.uf)
            print(f"Removido: {reg.cidade} - {reg.uf}")
        elif args.acao == "geocodificar":
            from revenda.localizacao import geocodificar_ocupadas

            n = geocodificar_ocupadas(ocupadas.listar())
            if n:
                sessao.salvar()
            print(f"{n} cidade(s) geocodificada(s).")
        else:
            if not len(ocupadas):
                print("Nenhuma cidade ocupada registrada.")
                return 0
            df = pd.DataFrame([r.to_dict() for r in ocupadas])
            print(df.to_string(index=False))
    except KeyError as e:
        log.error("Cidade não registrada: %s", e.args[0] if e.args else e)
        return 1
    except ValueError as e:
        log.error("%s", e)
        return 1
    return 0


# ===========================================================================
# Subcomando: exclusiva
# ===========================================================================


def cmd_exclusiva(args: argparse.Namespace) -> int:
    """CRUD das regras de exclusividade."""
    from revenda.alertas import descrever_validade

    sessao = _abrir_sessao(args)

    try:
        if args.acao == "adicionar":
            regra = sessao.adicionar_exclusividade(args.cidade, args.uf, args.ate)
            print(f"Exclusiva: {regra.cidade} - {regra.uf} ({descrever_validade(regra)})")
        elif args.acao == "remover":
            regra = sessao.remover_exclusividade(args.cidade, args.uf)
            print(f"Removida: {regra.cidade} - {regra.uf}")
        elif args.acao == "renovar":
            regra = sessao.renovar_exclusividade(args.cidade, args.uf, args.dias)
            print(f"Renovado para {regra.cidade}! {descrever_validade(regra)}")
        else:
            exclusivas = sessao.configuracao.exclusivas.listar()
            if not exclusivas:
                print("Nenhuma cidade exclusiva.")
                return 0
            for regra in exclusivas:
                rotulo = f"{regra.cidade} - {regra.uf}"
                print(f"  {rotulo:<36} {descrever_validade(regra)}")
    except KeyError as e:
        log.error("Cidade sem exclusividade: %s", e.args[0] if e.args else e)
        return 1
    except ValueError as e:
        log.error("%s", e)
        return 1
    return 0


# ===========================================================================
# Subcomando: alertas
# ===========================================================================


def cmd_alertas(args: argparse.Namespace) -> int:
    """Lista exclusividades vencendo dentro da janela de aviso."""
    sessao = _abrir_sessao(args)
    alertas = sessao.alertas()
    if not alertas:
        print("Nenhum alerta de vencimento.")
        return 0
    print(f"\nAlertas (janela de {sessao.configuracao.dias_aviso} dias):")
    for a in alertas:
        rotulo = f"{a.cidade} - {a.uf}"
        print(f"  {a.texto:<22} {rotulo}")
    return 0


# ===========================================================================
# Subcomando: status
# ===========================================================================


def cmd_status(args: argparse.Namespace) -> int:
    """Resumo da configuração e dos artefatos locais."""
    caminho = Path(args.config) if getattr(args, "config", None) else CONFIG_JSON
    sessao = _abrir_sessao(args)
    cfg = sessao.configuracao
    alertas = sessao.alertas()

    def _arquivo(p: Path) -> str:
        return "ok" if p.exists() else "ausente"

    print(f"\n{'Item':<28}  Valor")
    print("-" * 60)
    print(f"{'configuração':<28}  {_arquivo(caminho)}  ({caminho})")
    print(f"{'cache de municípios':<28}  {_arquivo(MUNICIPIOS_CSV)}  ({MUNICIPIOS_CSV})")
    print(f"{'regra de densidade':<28}  {cfg.regra_densidade}")
    print(f"{'dias de aviso':<28}  {cfg.dias_aviso}")
    print(f"{'limite mínimo de exibição':<28}  {cfg.limite_minimo_exibicao}")
    print(f"{'cidades ocupadas':<28}  {len(cfg.ocupadas)}")
    print(f"{'cidades exclusivas':<28}  {len(cfg.exclusivas)}")
    print(f"{'alertas de vencimento':<28}  {len(alertas)}")
    print()
    return 0


# ===========================================================================
# Parser argparse
# ===========================================================================


def _add_cidade_uf(p: argparse.ArgumentParser) -> None:
    p.add_argument("cidade", help="Nome do município")
    p.add_argument("uf", help="Sigla da UF (ex: RJ)")


def _build_parser() -> argparse.ArgumentParser:
    """Constrói o parser principal com todos os subcomandos."""
    parser = argparse.ArgumentParser(
        prog="revenda",
        description="Verificador de disponibilidade de praças para revendedores",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""\
Exemplos:
  revenda consultar --cep 24020-071                  Consulta por CEP
  revenda consultar --cidade Niterói --uf RJ --mapa consulta.html
  revenda municipios "sao goncalo"                   Busca por nome
  revenda densidade 8000                             Altera a regra
  revenda ocupacao registrar "Maricá" RJ 4           Registra revendedores
  revenda exclusiva adicionar Niterói RJ --ate 2026-12-31
  revenda alertas                                    Vencimentos próximos
""",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Exibe logs de depuração (DEBUG)"
    )
    parser.add_argument(
        "--config",
        default=None,
        metavar="PATH",
        help=f"Documento de configuração (padrão: {CONFIG_JSON})",
    )

    sub = parser.add_subparsers(dest="comando", required=True, metavar="COMANDO")

    # ------------------------------------------------------------ consultar
    p_con = sub.add_parser(
        "consultar",
        help="Verifica a disponibilidade de uma praça",
        description="Resolve CEP ou nome, obtém a população no IBGE e classifica a praça.",
    )
    grupo = p_con.add_mutually_exclusive_group(required=True)
    grupo.add_argument("--cep", metavar="CEP", help="CEP com ou sem máscara")
    grupo.add_argument("--cidade", metavar="NOME", help="Nome do município (requer --uf)")
    p_con.add_argument("--uf", metavar="UF", help="Sigla da UF quando --cidade é usado")
    p_con.add_argument(
        "--revendedores",
        type=int,
        default=None,
        metavar="N",
        help="Revendedores atuais (padrão: valor do registro de ocupação)",
    )
    p_con.add_argument(
        "--mapa",
        nargs="?",
        const=str(OUTPUT_HTML),
        default=None,
        metavar="PATH",
        help=f"Gera mapa HTML da consulta (padrão: {OUTPUT_HTML})",
    )
    p_con.add_argument(
        "--sem-coordenadas",
        action="store_true",
        help="Não consulta o Nominatim ao gerar o mapa",
    )

    # ----------------------------------------------------------- municipios
    p_mun = sub.add_parser(
        "municipios",
        help="Busca municípios por nome (ignora acentos e caixa)",
    )
    p_mun.add_argument("termo", help="Trecho do nome")
    p_mun.add_argument("--limite", type=int, default=10, metavar="N")

    # ------------------------------------------------- densidade/aviso/exibicao
    p_den = sub.add_parser("densidade", help="Exibe ou altera a regra de densidade")
    p_den.add_argument("valor", nargs="?", default=None, help="Habitantes por revendedor")

    p_av = sub.add_parser("aviso", help="Exibe ou altera os dias de aviso de vencimento")
    p_av.add_argument("valor", nargs="?", default=None, help="Dias de antecedência")

    p_ex = sub.add_parser(
        "exibicao", help='Exibe ou altera o piso do "Limite da Praça" exibido'
    )
    p_ex.add_argument("valor", nargs="?", default=None, help="Piso (0 desativa)")

    # ------------------------------------------------------------- ocupacao
    p_oc = sub.add_parser("ocupacao", help="Gerencia o registro de ocupação")
    oc_sub = p_oc.add_subparsers(dest="acao", metavar="ACAO")
    oc_sub.add_parser("listar", help="Lista cidades ocupadas")
    p_oc_reg = oc_sub.add_parser("registrar", help="Cria ou atualiza uma cidade")
    _add_cidade_uf(p_oc_reg)
    p_oc_reg.add_argument("revendedores", help="Quantidade atual de revendedores")
    p_oc_reg.add_argument("--ate", type=_data_arg, default=None, metavar="DATA")
    p_oc_rem = oc_sub.add_parser("remover", help="Remove uma cidade")
    _add_cidade_uf(p_oc_rem)
    oc_sub.add_parser("geocodificar", help="Preenche coordenadas via Nominatim")

    # ------------------------------------------------------------ exclusiva
    p_ecl = sub.add_parser("exclusiva", help="Gerencia cidades exclusivas")
    ecl_sub = p_ecl.add_subparsers(dest="acao", metavar="ACAO")
    ecl_sub.add_parser("listar", help="Lista cidades exclusivas")
    p_ecl_add = ecl_sub.add_parser("adicionar", help="Adiciona exclusividade")
    _add_cidade_uf(p_ecl_add)
    p_ecl_add.add_argument(
        "--ate",
        type=_data_arg,
        default=None,
        metavar="DATA",
        help="Válida até (AAAA-MM-DD ou DD/MM/AAAA). Omitido = permanente",
    )
    p_ecl_rem = ecl_sub.add_parser("remover", help="Remove exclusividade")
    _add_cidade_uf(p_ecl_rem)
    p_ecl_ren = ecl_sub.add_parser("renovar", help="Prorroga o vencimento")
    _add_cidade_uf(p_ecl_ren)
    p_ecl_ren.add_argument(
        "--dias",
        type=int,
        default=DIAS_RENOVACAO,
        metavar="N",
        help=f"Dias acrescentados (padrão: {DIAS_RENOVACAO})",
    )

    # ------------------------------------------------------ alertas/status
    sub.add_parser("alertas", help="Exclusividades vencendo ou vencidas")
    sub.add_parser("status", help="Resumo da configuração")

    return parser


# ===========================================================================
# Dispatch e entry point
# ===========================================================================

_HANDLER_MAP: dict[str, Callable[[argparse.Namespace], int]] = {
    "consultar": cmd_consultar,
    "municipios": cmd_municipios,
    "densidade": cmd_densidade,
    "aviso": cmd_aviso,
    "exibicao": cmd_exibicao,
    "ocupacao": cmd_ocupacao,
    "exclusiva": cmd_exclusiva,
    "alertas": cmd_alertas,
    "status": cmd_status,
}


def main(argv: list[str] | None = None) -> None:
    """Entry point público, chamado por ``python -m revenda`` e pelo script ``revenda``."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    _setup_logging(verbose=args.verbose)

    if args.comando == "consultar" and args.cidade and not args.uf:
        parser.error("--cidade requer --uf")

    handler = _HANDLER_MAP.get(args.comando)
    if handler is None:
        parser.print_help()
        sys.exit(1)

    sys.exit(handler(args))
