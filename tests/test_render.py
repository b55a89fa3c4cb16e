import pytest

from sheet_server import render


FLIP = {
    "id": "flip",
    "nome_personagem": "Flip",
    "nivel": 3,
    "classe": "Ladino",
    "raca": "Halfling",
    "pontos_vida": 21,
    "dado_vida": "3d8",
    "classe_armadura": 14,
    "bonus_proficiencia": 2,
    "bonus_iniciativa": 1,
    "idiomas": ["Comum", "Halfling"],
    "habilidades": {
        "destreza": {"nome": "Destreza", "valor": 16, "modificador": 3, "proficiencia_resistencia": True},
        "forca": {"nome": "Força", "valor": 8, "modificador": -1},
    },
    "pericias": {
        "furtividade": {"nome": "Furtividade", "habilidade_relacionada": "destreza", "proficiencia": True},
        "atletismo": {"nome": "Atletismo", "habilidade_relacionada": "forca"},
        "voo": {"nome": "Voo", "habilidade_relacionada": "asas"},
    },
}


def test_fmt_bonus():
    assert render.fmt_bonus(2) == "+2"
    assert render.fmt_bonus(0) == "+0"
    assert render.fmt_bonus(-1) == "-1"
    assert render.fmt_bonus("x") == "x"


def test_group_skills_by_ability():
    groups = render.group_skills_by_ability(FLIP["pericias"])
    assert list(groups) == list(render.ABILITY_ORDER)
    assert groups["destreza"] == [
        {"key": "furtividade", "nome": "Furtividade", "habilidade_relacionada": "destreza", "proficiencia": True}
    ]
    assert [s["key"] for s in groups["forca"]] == ["atletismo"]
    assert all(not skills for k, skills in groups.items() if k not in ("destreza", "forca"))


def test_group_skills_tolerates_missing_data():
    assert all(not v for v in render.group_skills_by_ability(None).values())
    assert all(not v for v in render.group_skills_by_ability({"x": "texto"}).values())


def test_skill_bonus_is_ability_modifier_only():
    skill = FLIP["pericias"]["furtividade"]
    assert render.calc_skill_bonus(skill, FLIP["habilidades"]) == 3
    assert render.calc_skill_bonus({"habilidade_relacionada": "carisma"}, FLIP["habilidades"]) == 0
    assert render.calc_skill_bonus({}, None) == 0


def test_initiative():
    assert render.initiative(FLIP) == 4
    assert render.initiative({"id": "x"}) == 0


def test_saving_throws_mark_proficiency():
    html = render.render_saving_throws(FLIP)
    assert '<div class="saving-throw">Força: -1</div>' in html
    assert '<div class="saving-throw proficiente">Destreza: +3</div>' in html
    assert html.index("Força") < html.index("Destreza")


def test_skills_grouped_with_titles():
    html = render.render_skills(FLIP)
    assert "<h4>Destreza</h4>" in html
    assert '<div class="skill proficiente">Furtividade: +3</div>' in html
    assert '<div class="skill">Atletismo: -1</div>' in html
    assert "Voo" not in html


def test_throw_range():
    assert render.throw_range({"alcance_arremesso": "6/18"}) == "6/18"
    assert render.throw_range({"propriedades": ["Leve", "Arremesso (alcance 20 / 60)"]}) == "20/60"
    assert render.throw_range({"propriedades": ["Arremesso (curto)"]}) == "curto"
    assert render.throw_range({"propriedades": "Leve"}) == ""
    assert render.throw_range({}) == ""


def test_armas_content():
    character = {"armas": [
        {"nome": "Adaga", "dano": "1d4", "tipo_dano": "perfurante", "proficiencia": True,
         "propriedades": ["Leve", "Arremesso (alcance 20/60)"]},
        {"nome": "Graveto"},
    ]}
    html = render.build_armas_content(character)
    assert '<h5 class="proficiente">Adaga</h5>' in html
    assert "<p><strong>Dano:</strong> 1d4 (perfurante)</p>" in html
    assert "<p><strong>Alcance de arremesso:</strong> 20/60</p>" in html
    assert '<span class="tag">Leve</span>' in html
    assert "<h5>Graveto</h5>" in html


def test_armas_content_empty_and_legacy():
    assert "Nenhuma arma cadastrada." in render.build_armas_content({})
    legacy = {"armas": {"adaga": {"nome": "Adaga"}}}
    assert "<h5>Adaga</h5>" in render.build_armas_content(legacy)


def test_spells_name_only_list():
    html = render.build_magias_content({"magias": ["Luz", "Escudo"]})
    assert html == '<div class="modal-magias"><div class="item"><h5>Luz</h5></div><div class="item"><h5>Escudo</h5></div></div>'


def test_spells_detailed():
    html = render.build_truques_content({"truques": [
        {"nome": "Luz", "alcance": 0, "componentes": ["v", "m"], "duracao": "1 hora"},
        {"descricao": "Sem nome", "alcance": "toque"},
    ]})
    assert html.startswith('<div class="modal-truques">')
    assert '<p class="prop"><strong>Alcance:</strong> 0m</p>' in html
    assert '<span class="tag comp-V">v</span> <span class="tag comp-M">m</span>' in html
    assert "<p class=\"prop\"><strong>Duração:</strong> 1 hora</p>" in html
    assert "<h5>Truque</h5>" in html
    assert "toque" in html


def test_spells_empty():
    assert render.build_magias_content({}) == "<p>Nenhuma magia cadastrada.</p>"
    assert render.build_magias_content({"magias": []}) == "<p>Nenhuma magia cadastrada.</p>"
    assert render.build_truques_content({"truques": {}}) == "<p>Nenhum truque cadastrado.</p>"


def test_range_text():
    assert render.range_text(9) == "9m"
    assert render.range_text(None) == ""
    assert render.range_text("pessoal") == "pessoal"


def test_equipamentos_content():
    html = render.build_equipamentos_content({"equipamentos": [{
        "nome": "Anel",
        "propriedades": ["Magico"],
        "efeitos": ["Brilha", {"nome": "Protege"}],
        "descricao": "Um anel antigo.",
        "bonus": "+1 CA",
        "cargas": [],
        "materiais": ["ouro", {"name": "rubi"}],
        "custo": {"po": 50},
        "peso": 0,
        "nota": "",
    }]})
    assert "<h5>Anel</h5>" in html
    assert '<p class="equipment-tags"><span class="tag">Magico</span></p>' in html
    assert '<ul class="equipment-effects"><li>Brilha</li><li>Protege</li></ul>' in html
    assert "<p>Um anel antigo.</p>" in html
    assert "<p><strong>Bônus:</strong> +1 CA</p>" in html
    assert "cargas" not in html
    assert "<p><strong>materiais:</strong> ouro, rubi</p>" in html
    assert "<p><strong>custo:</strong> po: 50</p>" in html
    assert "<p><strong>peso:</strong> 0</p>" in html
    assert "nota" not in html


def test_equipamentos_empty():
    assert render.build_equipamentos_content({"equipamentos": None}) == "<p>Nenhum equipamento cadastrado.</p>"


def test_tracos_content():
    html = render.build_tracos_content({"tracos": [{"nome": "Sortudo", "descricao": "Rola de novo."}, {}]})
    assert "<h5>Sortudo</h5><p>Rola de novo.</p>" in html
    assert "<h5>Traço</h5>" in html
    assert render.build_tracos_content({}) == "<p>Nenhum traço cadastrado.</p>"


def test_proficiencias_content():
    html = render.build_proficiencias_content({"proficiencias": {"armas": ["Simples", {"nome": "Arcos"}], "armaduras": []}})
    assert "<p><strong>Armas:</strong> Simples, Arcos</p>" in html
    assert "<p><strong>Armaduras:</strong> Nenhuma</p>" in html
    assert "<p><strong>Ferramentas:</strong> Nenhuma</p>" in html


def test_render_card():
    html = render.render_card(FLIP, "img")
    assert html.startswith('<article class="card" id="card-flip">')
    assert 'src="img/token_flip.png"' in html
    assert "img/token_flip.gif" in html
    assert '<span class="header-level">Nível 3</span>' in html
    assert '<span class="hit-die" aria-label="Dado de vida" title="Dado de vida">3d8</span>' in html
    assert '<span class="value">+2</span>' in html
    assert '<span class="chip">Idiomas: Comum, Halfling</span>' in html
    assert '<span class="initiative">Iniciativa: +4</span>' in html
    for action in render.DETAIL_VIEWS:
        assert f'data-action="{action}" data-char="flip"' in html


@pytest.mark.parametrize("character", [
    {"id": "vazio"},
    {"id": "estranho", "habilidades": "nenhuma", "pericias": ["x"], "idiomas": "Comum",
     "proficiencias": None, "armas": "Adaga", "magias": 3, "tracos": [None]},
])
def test_formatters_never_raise_on_odd_data(character):
    render.render_card(character)
    for _title, builder in render.DETAIL_VIEWS.values():
        builder(character)


def test_card_uses_accented_level_and_id_fallback():
    html = render.render_card({"id": "bruna", "nível": 1})
    assert "Nível 1" in html
    assert '<div class="card-title">bruna</div>' in html
    assert "PV" not in html


def test_text_is_escaped():
    html = render.render_card({"id": "x", "nome_personagem": "<b>Bob</b>"})
    assert "<b>Bob</b>" not in html
    assert "&lt;b&gt;Bob&lt;/b&gt;" in html


def test_render_page_and_error():
    page = render.render_page([FLIP])
    assert page.startswith("<!DOCTYPE html>")
    assert 'id="card-flip"' in page
    assert 'id="detail-flip-armas" data-title="Armas — Flip"' in page
    assert 'id="reference-armaduras"' in page
    assert 'id="modal"' in page

    error = render.render_error(FileNotFoundError("ficha_personagens.yaml"))
    assert "Erro ao carregar: ficha_personagens.yaml" in error
    assert 'class="card"' not in error


def test_null_names_fall_back_to_keys():
    character = {
        "id": "x",
        "habilidades": {"forca": {"nome": None, "modificador": 1}},
        "pericias": {"atletismo": {"nome": None, "habilidade_relacionada": "forca"}},
    }
    assert '<div class="saving-throw">forca: +1</div>' in render.render_saving_throws(character)
    assert '<div class="skill">atletismo: +1</div>' in render.render_skills(character)
    assert '<div class="ability-name"></div>' in render.render_abilities(character)
    assert "None" not in render.render_card(character)
