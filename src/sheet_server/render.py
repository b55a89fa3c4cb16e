"""HTML builders for character cards and their detail views.

Every builder takes a normalized, resolved character mapping and treats a
missing or oddly shaped field as "leave it out": nothing here raises on
incomplete data. All text taken from the data files is HTML-escaped.
"""
from html import escape
import re
from typing import Any, Callable, Dict, List, Tuple

from .models import NAME_KEY, Character

ABILITY_ORDER = ("forca", "destreza", "constituicao", "inteligencia", "sabedoria", "carisma")
ABILITY_TITLES = {
    "forca": "Força",
    "destreza": "Destreza",
    "constituicao": "Constituição",
    "inteligencia": "Inteligência",
    "sabedoria": "Sabedoria",
    "carisma": "Carisma",
}

# kind -> (modal title, image file, alt text)
REFERENCE_TABLES = {
    "armas": ("Armas", "armas.png", "Tabela de Armas"),
    "armaduras": ("Armaduras", "armaduras.png", "Tabela de Armaduras"),
}

_RANGE_RE = re.compile(r"alcance\s*([0-9]+\s*/\s*[0-9]+)", re.IGNORECASE)
_THROWN_RE = re.compile(r"arremesso[^)]*\((?:alcance\s*)?([^)]+)\)", re.IGNORECASE)


def _text(value: Any) -> str:
    return escape(str(value))


def _mapping(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


def _int(value: Any, default: int = 0) -> int:
    if value is None or isinstance(value, bool):
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _record(value: Any) -> dict:
    """Entries that are not mappings are shown by name only."""
    if isinstance(value, dict):
        return value
    return {NAME_KEY: value}


def fmt_bonus(n: Any) -> str:
    if isinstance(n, (int, float)) and not isinstance(n, bool):
        return f"+{n}" if n >= 0 else str(n)
    return str(n)


def ensure_list(value: Any) -> list:
    """Lists as-is, mappings as their values, empty values as []."""
    if not value:
        return []
    if isinstance(value, list):
        return value
    if isinstance(value, dict):
        return list(value.values())
    return [value]


def item_label(item: Any) -> str:
    if isinstance(item, dict):
        label = item.get(NAME_KEY) or item.get("name")
        if label:
            return str(label)
        return ", ".join(str(v) for v in item.values())
    if item is None:
        return ""
    return str(item)


def character_name(character: Character) -> str:
    return str(character.get("nome_personagem") or character.get("id", ""))


def image_path_for(character_id: Any, image_dir: str = "img", ext: str = "png") -> str:
    return f"{image_dir}/token_{character_id}.{ext}"


# -- abilities, saving throws, skills ---------------------------------------

def group_skills_by_ability(pericias: Any) -> Dict[str, List[dict]]:
    groups: Dict[str, List[dict]] = {key: [] for key in ABILITY_ORDER}
    for key, skill in _mapping(pericias).items():
        if not isinstance(skill, dict):
            continue
        ability = skill.get("habilidade_relacionada")
        if ability in groups:
            groups[ability].append({"key": key, **skill})
    return groups


def calc_skill_bonus(skill: dict, habilidades: Any) -> int:
    # proficiency is intentionally not added to skill bonuses
    ability = _mapping(habilidades).get(skill.get("habilidade_relacionada"))
    if not isinstance(ability, dict):
        return 0
    return _int(ability.get("modificador"))


def initiative(character: Character) -> int:
    dex = _mapping(_mapping(character.get("habilidades")).get("destreza"))
    return _int(dex.get("modificador")) + _int(character.get("bonus_iniciativa"))


def render_ability(ability: dict) -> str:
    return (
        '<div class="ability">'
        f'<div class="ability-name">{_text(ability.get("nome") or "")}</div>'
        f'<div class="ability-value">{_text(ability.get("valor", ""))}</div>'
        f'<div class="ability-mod">({fmt_bonus(_int(ability.get("modificador")))})</div>'
        "</div>"
    )


def render_abilities(character: Character) -> str:
    habilidades = _mapping(character.get("habilidades"))
    parts = [render_ability(habilidades[k]) for k in ABILITY_ORDER if isinstance(habilidades.get(k), dict)]
    return f'<div class="abilities">{"".join(parts)}</div>'


def render_saving_throws(character: Character) -> str:
    habilidades = _mapping(character.get("habilidades"))
    items = []
    for key in ABILITY_ORDER:
        ability = habilidades.get(key)
        if not isinstance(ability, dict):
            continue
        cls = "saving-throw proficiente" if ability.get("proficiencia_resistencia") else "saving-throw"
        items.append(
            f'<div class="{cls}">{_text(ability.get("nome") or key)}: '
            f'{fmt_bonus(_int(ability.get("modificador")))}</div>'
        )
    return f'<div class="saving-throws">{"".join(items)}</div>'


def render_skills(character: Character) -> str:
    habilidades = character.get("habilidades")
    groups_html = []
    for ability, skills in group_skills_by_ability(character.get("pericias")).items():
        if not skills:
            continue
        items = "".join(
            f'<div class="{"skill proficiente" if s.get("proficiencia") else "skill"}">'
            f'{_text(s.get("nome") or s["key"])}: {fmt_bonus(calc_skill_bonus(s, habilidades))}</div>'
            for s in skills
        )
        groups_html.append(
            f'<div class="skill-group"><h4>{_text(ABILITY_TITLES.get(ability, ability))}</h4>'
            f'<div class="skill-list">{items}</div></div>'
        )
    return f'<div class="skills">{"".join(groups_html)}</div>'


def format_proficiencias_list(value: Any) -> str:
    items = ensure_list(value)
    if not items:
        return "Nenhuma"
    return _text(", ".join(item_label(x) for x in items))


def build_proficiencias_content(character: Character) -> str:
    profs = _mapping(character.get("proficiencias"))
    return (
        '<div class="item proficiencias">'
        f'<p><strong>Armas:</strong> {format_proficiencias_list(profs.get("armas"))}</p>'
        f'<p><strong>Armaduras:</strong> {format_proficiencias_list(profs.get("armaduras"))}</p>'
        f'<p><strong>Ferramentas:</strong> {format_proficiencias_list(profs.get("ferramentas"))}</p>'
        "</div>"
    )


# -- detail views -----------------------------------------------------------

def _tags(values: Any, css: str = "tag", upper_class: bool = False) -> str:
    if not isinstance(values, list):
        return ""
    tags = []
    for v in values:
        cls = f"{css} comp-{_text(str(v).upper())}" if upper_class else css
        tags.append(f'<span class="{cls}">{_text(v)}</span>')
    return " ".join(tags)


def throw_range(weapon: dict) -> str:
    """Thrown range, explicit or read from a property like ``Arremesso (alcance 20/60)``."""
    explicit = weapon.get("alcance_arremesso")
    if explicit:
        return str(explicit)
    props = weapon.get("propriedades")
    for prop in props if isinstance(props, list) else []:
        if not isinstance(prop, str):
            continue
        m = _RANGE_RE.search(prop)
        if m:
            return re.sub(r"\s+", "", m.group(1))
        m = _THROWN_RE.search(prop)
        if m:
            return m.group(1).strip()
    return ""


def build_armas_content(character: Character) -> str:
    weapons = [_record(a) for a in ensure_list(character.get("armas"))]
    if not weapons:
        return '<div class="modal-armas"><p>Nenhuma arma cadastrada.</p></div>'
    items = []
    for a in weapons:
        h5 = '<h5 class="proficiente">' if a.get("proficiencia") else "<h5>"
        parts = [f'{h5}{_text(a.get(NAME_KEY) or "Arma")}</h5>']
        if a.get("dano"):
            kind = f' ({_text(a["tipo_dano"])})' if a.get("tipo_dano") else ""
            parts.append(f'<p><strong>Dano:</strong> {_text(a["dano"])}{kind}</p>')
        reach = throw_range(a)
        if reach:
            parts.append(f"<p><strong>Alcance de arremesso:</strong> {_text(reach)}</p>")
        tags = _tags(a.get("propriedades"))
        if tags:
            parts.append(f'<p class="weapon-tags">{tags}</p>')
        items.append(f'<div class="item">{"".join(parts)}</div>')
    return f'<div class="modal-armas">{"".join(items)}</div>'


def range_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return f"{value}m"
    return str(value)


def _spell_item(spell: dict, default_title: str) -> str:
    parts = [f"<h5>{_text(spell.get(NAME_KEY) or default_title)}</h5>"]
    if spell.get("descricao"):
        parts.append(f"<p>{_text(spell['descricao'])}</p>")
    if spell.get("dano"):
        parts.append(f'<p class="prop"><strong>Dano:</strong> {_text(spell["dano"])}</p>')
    reach = range_text(spell.get("alcance"))
    if reach:
        parts.append(f'<p class="prop"><strong>Alcance:</strong> {_text(reach)}</p>')
    if spell.get("duracao"):
        parts.append(f'<p class="prop"><strong>Duração:</strong> {_text(spell["duracao"])}</p>')
    components = _tags(spell.get("componentes"), upper_class=True)
    if components:
        parts.append(f"<p>{components}</p>")
    return f'<div class="item">{"".join(parts)}</div>'


def _build_spell_list(entries: Any, css: str, default_title: str, empty: str) -> str:
    if isinstance(entries, list) and entries and all(isinstance(e, str) for e in entries):
        items = "".join(f'<div class="item"><h5>{_text(name)}</h5></div>' for name in entries)
        return f'<div class="{css}">{items}</div>'
    entries = ensure_list(entries)
    if not entries:
        return f"<p>{empty}</p>"
    items = "".join(_spell_item(_record(e), default_title) for e in entries)
    return f'<div class="{css}">{items}</div>'


def build_magias_content(character: Character) -> str:
    return _build_spell_list(character.get("magias"), "modal-magias", "Magia", "Nenhuma magia cadastrada.")


def build_truques_content(character: Character) -> str:
    return _build_spell_list(character.get("truques"), "modal-truques", "Truque", "Nenhum truque cadastrado.")


def _equipment_field(key: str, value: Any) -> str:
    lowered = str(key).lower()
    if lowered == "propriedades":
        tags = _tags(value)
        return f'<p class="equipment-tags">{tags}</p>' if tags else ""
    if lowered == "efeitos":
        effects = value if isinstance(value, list) else []
        if not effects:
            return ""
        lis = "".join(f"<li>{_text(item_label(e))}</li>" for e in effects)
        return f'<p class="effects-label"><strong>Efeitos:</strong></p><ul class="equipment-effects">{lis}</ul>'
    if lowered in ("descricao", "descrição"):
        return f"<p>{_text(value)}</p>" if value else ""
    if lowered in ("bonus", "bônus"):
        return f"<p><strong>Bônus:</strong> {_text(value)}</p>" if value else ""
    if isinstance(value, list):
        if not value:
            return ""
        content = ", ".join(item_label(v) for v in value)
    elif isinstance(value, dict):
        content = "; ".join(f"{k}: {v}" for k, v in value.items())
    elif value is None or value == "":
        return ""
    else:
        content = str(value)
    return f"<p><strong>{_text(key)}:</strong> {_text(content)}</p>"


def build_equipamentos_content(character: Character) -> str:
    equipment = [_record(e) for e in ensure_list(character.get("equipamentos"))]
    if not equipment:
        return "<p>Nenhum equipamento cadastrado.</p>"
    items = []
    for e in equipment:
        parts = "".join(_equipment_field(k, v) for k, v in e.items() if k != NAME_KEY)
        items.append(f'<div class="item"><h5>{_text(e.get(NAME_KEY) or "Equipamento")}</h5>{parts}</div>')
    return f'<div class="modal-equipamentos">{"".join(items)}</div>'


def build_tracos_content(character: Character) -> str:
    traits = [_record(t) for t in ensure_list(character.get("tracos"))]
    if not traits:
        return "<p>Nenhum traço cadastrado.</p>"
    items = []
    for t in traits:
        desc = f"<p>{_text(t['descricao'])}</p>" if t.get("descricao") else ""
        items.append(f'<div class="item"><h5>{_text(t.get(NAME_KEY) or "Traço")}</h5>{desc}</div>')
    return "".join(items)


# action -> (title, builder); also the order of the card buttons
DETAIL_VIEWS: Dict[str, Tuple[str, Callable[[Character], str]]] = {
    "armas": ("Armas", build_armas_content),
    "magias": ("Magias", build_magias_content),
    "truques": ("Truques", build_truques_content),
    "equipamentos": ("Equipamentos", build_equipamentos_content),
    "tracos": ("Traços", build_tracos_content),
}


def reference_table_content(kind: str, image_dir: str = "img") -> str:
    _title, filename, alt = REFERENCE_TABLES[kind]
    return f'<img src="{_text(image_dir)}/{filename}" alt="{alt}" class="modal-image"/>'


# -- cards and pages --------------------------------------------------------

def _header_stats(character: Character) -> str:
    stats = []
    hp = character.get("pontos_vida")
    if hp is not None:
        die = character.get("dado_vida")
        die_html = (
            f'<span class="hit-die" aria-label="Dado de vida" title="Dado de vida">{_text(die)}</span>'
            if die else ""
        )
        stats.append(
            '<div class="stat pv"><span class="icon heart"></span><span class="label">PV</span>'
            f'<span class="value">{_text(hp)}</span>{die_html}</div>'
        )
    ac = character.get("classe_armadura")
    if ac is not None:
        stats.append(
            '<div class="stat ca"><span class="icon shield"></span><span class="label">CA</span>'
            f'<span class="value">{_text(ac)}</span></div>'
        )
    prof = character.get("bonus_proficiencia")
    if prof is not None:
        stats.append(
            '<div class="stat prof"><span class="icon star"></span><span class="label">Prof</span>'
            f'<span class="value">{_text(fmt_bonus(prof))}</span></div>'
        )
    return f'<div class="header-stats row">{"".join(stats)}</div>'


def _meta(character: Character) -> str:
    chips = []
    for key in ("raca", "classe"):
        if character.get(key):
            chips.append(f'<span class="chip">{_text(character[key])}</span>')
    languages = character.get("idiomas")
    if isinstance(languages, list) and languages:
        chips.append(f'<span class="chip">Idiomas: {_text(", ".join(str(x) for x in languages))}</span>')
    chips.append(f'<span class="initiative">Iniciativa: {fmt_bonus(initiative(character))}</span>')
    return f'<div class="meta">{"".join(chips)}</div>'


def _section(title: str, body: str) -> str:
    return f'<div class="section"><h3>{title}</h3>{body}</div>'


def render_card(character: Character, image_dir: str = "img") -> str:
    char_id = _text(character.get("id", ""))
    name = _text(character_name(character))
    level = character.get("nivel")
    if level is None:
        level = character.get("nível")
    level_html = f'<span class="header-level">Nível {_text(level)}</span>' if level is not None else ""
    img = _text(image_path_for(character.get("id", ""), image_dir))
    gif = _text(image_path_for(character.get("id", ""), image_dir, "gif"))
    buttons = "".join(
        f'<button class="button" data-action="{action}" data-char="{char_id}">{title}</button>'
        for action, (title, _builder) in DETAIL_VIEWS.items()
    )
    return (
        f'<article class="card" id="card-{char_id}">'
        '<div class="card-header">'
        f'<img class="avatar" src="{img}" alt="{name}" '
        f"onerror=\"this.onerror=null; this.src='{gif}'\" />"
        f'<div class="card-title">{name}</div>{level_html}'
        "</div>"
        '<div class="card-body">'
        f"{_header_stats(character)}{_meta(character)}"
        f'{_section("Habilidades", render_abilities(character))}'
        f'{_section("Testes de Resistência", render_saving_throws(character))}'
        f'{_section("Perícias", render_skills(character))}'
        f'{_section("Proficiências", build_proficiencias_content(character))}'
        f'<div class="actions">{buttons}</div>'
        "</div>"
        "</article>"
    )


def render_detail_templates(character: Character) -> str:
    char_id = _text(character.get("id", ""))
    name = _text(character_name(character))
    return "".join(
        f'<template id="detail-{char_id}-{action}" data-title="{title} — {name}">{builder(character)}</template>'
        for action, (title, builder) in DETAIL_VIEWS.items()
    )


_PAGE_SCRIPT = """
(function(){
  const modal = document.getElementById('modal');
  function openModal(title, html){
    document.getElementById('modal-title').textContent = title;
    document.getElementById('modal-content').innerHTML = html;
    modal.setAttribute('aria-hidden', 'false');
  }
  function closeModal(){ modal.setAttribute('aria-hidden', 'true'); }
  function openTemplate(id){
    const tpl = document.getElementById(id);
    if(tpl) openModal(tpl.dataset.title, tpl.innerHTML);
  }
  document.addEventListener('click', (e) => {
    const t = e.target;
    if(t && t.hasAttribute('data-close-modal')) return closeModal();
    const btn = t.closest && t.closest('button[data-action]');
    if(btn) return openTemplate('detail-' + btn.dataset.char + '-' + btn.dataset.action);
    const ref = t.closest && t.closest('a[data-reference]');
    if(ref){ e.preventDefault(); openTemplate('reference-' + ref.dataset.reference); }
  });
  document.addEventListener('keydown', (e) => { if(e.key === 'Escape') closeModal(); });
})();
"""


def _page(body: str, title: str) -> str:
    return (
        "<!DOCTYPE html>\n"
        '<html lang="pt-BR"><head><meta charset="UTF-8">'
        f"<title>{_text(title)}</title>"
        '<link rel="stylesheet" href="style.css"></head><body>'
        f"{body}</body></html>\n"
    )


def _modal_skeleton() -> str:
    return (
        '<div id="modal" class="modal" aria-hidden="true">'
        '<div class="modal-backdrop" data-close-modal></div>'
        '<div class="modal-dialog" role="dialog" aria-modal="true" aria-labelledby="modal-title">'
        '<button class="modal-close" data-close-modal aria-label="Fechar">&times;</button>'
        '<h2 id="modal-title"></h2><div id="modal-content"></div>'
        "</div></div>"
    )


def _nav(image_dir: str) -> str:
    links = []
    templates = []
    for kind, (title, _filename, _alt) in REFERENCE_TABLES.items():
        links.append(f'<a href="#" id="open-{kind}" data-reference="{kind}">{title}</a>')
        templates.append(
            f'<template id="reference-{kind}" data-title="{title}">'
            f"{reference_table_content(kind, image_dir)}</template>"
        )
    return f'<nav class="header-nav">{"".join(links)}</nav>{"".join(templates)}'


def render_page(characters: List[Character], image_dir: str = "img", title: str = "Fichas de Personagens") -> str:
    cards = "".join(render_card(c, image_dir) for c in characters)
    details = "".join(render_detail_templates(c) for c in characters)
    body = (
        f'<header><h1>{_text(title)}</h1>{_nav(image_dir)}</header>'
        f'<main id="cards" class="cards">{cards}</main>{details}'
        f"{_modal_skeleton()}<script>{_PAGE_SCRIPT}</script>"
    )
    return _page(body, title)


def render_error(err: BaseException, title: str = "Fichas de Personagens") -> str:
    body = (
        f"<header><h1>{_text(title)}</h1></header>"
        f'<main id="cards" class="cards"><div class="item">Erro ao carregar: {_text(err)}</div></main>'
    )
    return _page(body, title)
