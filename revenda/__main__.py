"""
Ponto de entrada de ``python -m revenda``.

Delega imediatamente para :func:`revenda.cli.main`, que constrói o parser
argparse e despacha para o subcomando correto.

Uso::

    python -m revenda --help
    python -m revenda consultar --cep 24020-071
    python -m revenda status
"""

from revenda.cli import main

if __name__ == "__main__":
    main()
