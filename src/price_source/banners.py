"""Store banner normalization.

The price source reports each branch's banner verbatim ("CARREFOUR
HIPER", "DIA % MARKET"); the planner treats a banner family as one
store.
"""

from __future__ import annotations

BANNER_ALIASES: dict[str, str] = {
    "CARREFOUR HIPER": "Carrefour",
    "CARREFOUR MARKET": "Carrefour",
    "CARREFOUR EXPRESS": "Carrefour",
    "CARREFOUR MAXI": "Carrefour",
    "COTO": "Coto",
    "COTO CICSA": "Coto",
    "DIA": "Dia",
    "DIA % MARKET": "Dia",
    "DIA %": "Dia",
    "JUMBO": "Jumbo",
    "DISCO": "Disco",
    "VEA": "Vea",
    "CHANGOMAS": "Changomas",
    "WALMART": "Changomas",
    "LA ANONIMA": "La Anonima",
    "MAKRO": "Makro",
    "DIARCO": "Diarco",
    "LIBERTAD": "Libertad",
    "ATOMO": "Atomo",
}


def normalize_store_banner(banner: str) -> str:
    """Map a raw banner to its canonical store name.

    Examples:
        "CARREFOUR HIPER" -> "Carrefour"
        "supermercados toledo" -> "Supermercados Toledo"
    """
    cleaned = " ".join(banner.split())
    alias = BANNER_ALIASES.get(cleaned.upper())
    if alias:
        return alias
    return " ".join(word[:1].upper() + word[1:] for word in cleaned.lower().split(" ") if word)
