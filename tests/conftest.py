from pathlib import Path
import textwrap

import pytest
import requests

ROSTER = """
- flip:
    - nome_personagem: Flip
    - nivel: 3
    - classe: Ladino
    - raca: Halfling
    - pontos_vida: 21
    - dado_vida: 3d8
    - classe_armadura: 14
    - bonus_proficiencia: 2
    - bonus_iniciativa: 1
    - idiomas:
        - Comum
        - Halfling
    - habilidades:
        - destreza:
            - nome: Destreza
            - valor: 16
            - modificador: 3
            - proficiencia_resistencia: true
        - forca:
            nome: Força
            valor: 8
            modificador: -1
    - pericias:
        - furtividade:
            nome: Furtividade
            habilidade_relacionada: destreza
            proficiencia: true
        - atletismo:
            nome: Atletismo
            habilidade_relacionada: forca
    - proficiencias:
        - armas:
            - Armas simples
        - armaduras: []
    - armas:
        - Adaga
        - nome: Besta Caseira
          dano: 1d6
    - magias: []
    - truques:
        - Luz
    - tracos:
        - Sortudo
        - Sombra Viva
    - equipamentos:
        - Mochila
- bruna:
    nome_personagem: Bruna
    nível: 1
"""

CATALOGS = {
    "armas.yaml": """
        Adaga:
          nome: Adaga
          dano: 1d4
          tipo_dano: perfurante
          proficiencia: true
          propriedades:
            - Leve
            - Arremesso (alcance 20/60)
    """,
    "magias.yaml": """
        Misseis Magicos:
          nome: Misseis Magicos
          dano: 3d4+3
    """,
    "tracos.yaml": """
        Sortudo:
          nome: Sortudo
          descricao: Rola de novo resultados 1.
    """,
    "truques.yaml": """
        truques:
          Luz:
            nome: Luz
            alcance: 0
            componentes: [v, m]
    """,
    "equipamentos.yaml": """
        Mochila:
          - nome: Mochila
          - peso: 2
          - efeitos:
              - Guarda itens
    """,
}


def write_data(root: Path, roster: str = ROSTER, catalogs: dict | None = None) -> Path:
    (root / "yaml").mkdir(parents=True, exist_ok=True)
    (root / "ficha_personagens.yaml").write_text(textwrap.dedent(roster), encoding="utf-8")
    for name, text in (CATALOGS if catalogs is None else catalogs).items():
        (root / "yaml" / name).write_text(textwrap.dedent(text), encoding="utf-8")
    return root


@pytest.fixture
def data_dir(tmp_path):
    return write_data(tmp_path / "data")


class FakeResponse:
    def __init__(self, text: str = "", status_code: int = 200):
        self.text = text
        self.content = text.encode("utf-8")
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")
