"""Region name standardization.

Spreadsheets from different sources spell Spanish autonomous communities in
many ways (regional languages, missing accents, sheet-tab capitals). This
module maps the known variants onto one official spelling so location keys
line up across sources.
"""

from orgdedupe.normalize.text import clean

OFFICIAL_REGIONS: tuple[str, ...] = (
    "Andalucía",
    "Aragón",
    "Principado de Asturias",
    "Illes Balears",
    "Canarias",
    "Cantabria",
    "Castilla-La Mancha",
    "Castilla y León",
    "Cataluña",
    "Comunitat Valenciana",
    "Extremadura",
    "Galicia",
    "Comunidad de Madrid",
    "Región de Murcia",
    "Comunidad Foral de Navarra",
    "País Vasco",
    "La Rioja",
    "Ceuta",
    "Melilla",
    "Estado Español",
)

REGION_VARIANTS: dict[str, str] = {
    **{name: name for name in OFFICIAL_REGIONS},
    "País Valencià": "Comunitat Valenciana",
    "Pais Valencià": "Comunitat Valenciana",
    "Comunidad Valenciana": "Comunitat Valenciana",
    "Comunitat Valencia": "Comunitat Valenciana",
    "Valencia": "Comunitat Valenciana",
    "Catalunya": "Cataluña",
    "Catalonia": "Cataluña",
    "Asturias": "Principado de Asturias",
    "Asturies": "Principado de Asturias",
    "Madrid": "Comunidad de Madrid",
    "Murcia": "Región de Murcia",
    "Castilla León": "Castilla y León",
    "Castilla-León": "Castilla y León",
    "Castilla La Mancha": "Castilla-La Mancha",
    "Baleares": "Illes Balears",
    "Islas Baleares": "Illes Balears",
    "Balears": "Illes Balears",
    "Navarra": "Comunidad Foral de Navarra",
    "Nafarroa": "Comunidad Foral de Navarra",
    "Euskadi": "País Vasco",
    "Pais Vasco": "País Vasco",
    "Basque Country": "País Vasco",
    "Rioja": "La Rioja",
    "Islas Canarias": "Canarias",
    "Andalucia": "Andalucía",
    "Asociaciones, Colectivos": "Estado Español",
}

_CASEFOLDED_VARIANTS: dict[str, str] = {
    variant.casefold(): official for variant, official in REGION_VARIANTS.items()
}

# (all substrings required, official name), checked in order
_FRAGMENT_RULES: tuple[tuple[tuple[str, ...], str], ...] = (
    (("valenc",), "Comunitat Valenciana"),
    (("catalu",), "Cataluña"),
    (("catalo",), "Cataluña"),
    (("astur",), "Principado de Asturias"),
    (("madrid",), "Comunidad de Madrid"),
    (("murcia",), "Región de Murcia"),
    (("castilla", "león"), "Castilla y León"),
    (("castilla", "leon"), "Castilla y León"),
    (("castilla", "mancha"), "Castilla-La Mancha"),
    (("balear",), "Illes Balears"),
    (("canaria",), "Canarias"),
    (("andaluc",), "Andalucía"),
    (("galicia",), "Galicia"),
    (("aragon",), "Aragón"),
    (("aragón",), "Aragón"),
    (("extremadura",), "Extremadura"),
    (("cantabria",), "Cantabria"),
    (("navarra",), "Comunidad Foral de Navarra"),
    (("vasco",), "País Vasco"),
    (("euskadi",), "País Vasco"),
    (("rioja",), "La Rioja"),
)


def standardize_region(name: object) -> str:
    """Map a region spelling variant onto its official name.

    Lookup order: exact variant, case-insensitive variant, then substring
    heuristics for common misspellings.

    Parameters
    ----------
    name : object
        Raw region value.

    Returns
    -------
    str
        Official region name, the cleaned input when unknown, or ``""`` when
        the input is empty.

    Examples
    --------
        >>> standardize_region("CATALUNYA")
        'Cataluña'
        >>> standardize_region("Pais valencia")
        'Comunitat Valenciana'
    """
    text = clean(name)
    if not text:
        return ""

    if text in REGION_VARIANTS:
        return REGION_VARIANTS[text]

    folded = text.casefold()
    if folded in _CASEFOLDED_VARIANTS:
        return _CASEFOLDED_VARIANTS[folded]

    for fragments, official in _FRAGMENT_RULES:
        if all(fragment in folded for fragment in fragments):
            return official

    return text


def is_known_region(name: object) -> bool:
    """Check whether *name* standardizes to an official region."""
    return standardize_region(name) in OFFICIAL_REGIONS
