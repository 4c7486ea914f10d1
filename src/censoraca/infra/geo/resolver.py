"""
CensoRaca - Infrastructure Geo Adapter (State Resolver).

Resolves state inputs (IBGE codes, abbreviations or names) to the standard
2-digit IBGE state codes used to restrict SIDRA and geobr queries.
"""
from numbers import Integral
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple

from unidecode import unidecode

from censoraca.core.geo.utils import fix_encoding
from censoraca.core.types import StateInput
from censoraca.settings import logger

# IBGE Code -> (Abbreviation, Name)
STATES: Dict[int, Tuple[str, str]] = {
    11: ("RO", "Rondônia"), 12: ("AC", "Acre"), 13: ("AM", "Amazonas"),
    14: ("RR", "Roraima"), 15: ("PA", "Pará"), 16: ("AP", "Amapá"),
    17: ("TO", "Tocantins"), 21: ("MA", "Maranhão"), 22: ("PI", "Piauí"),
    23: ("CE", "Ceará"), 24: ("RN", "Rio Grande do Norte"),
    25: ("PB", "Paraíba"), 26: ("PE", "Pernambuco"), 27: ("AL", "Alagoas"),
    28: ("SE", "Sergipe"), 29: ("BA", "Bahia"), 31: ("MG", "Minas Gerais"),
    32: ("ES", "Espírito Santo"), 33: ("RJ", "Rio de Janeiro"),
    35: ("SP", "São Paulo"), 41: ("PR", "Paraná"),
    42: ("SC", "Santa Catarina"), 43: ("RS", "Rio Grande do Sul"),
    50: ("MS", "Mato Grosso do Sul"), 51: ("MT", "Mato Grosso"),
    52: ("GO", "Goiás"), 53: ("DF", "Distrito Federal"),
}


def _normalize_text(text: Any) -> str:
    """Normalizes text for comparison (remove accents, lowercase)."""
    return unidecode(fix_encoding(str(text))).lower().strip()


def _build_lookup() -> Dict[str, int]:
    lookup: Dict[str, int] = {}
    for code, (abbrev, name) in STATES.items():
        lookup[_normalize_text(abbrev)] = code
        lookup[_normalize_text(name)] = code
    return lookup


_LOOKUP = _build_lookup()


def state_abbrev(code: int) -> str:
    """Returns the UF abbreviation for a 2-digit IBGE code."""
    return STATES[int(code)][0]


def resolve_states(states: Optional[Iterable[StateInput]]) -> List[int]:
    """
    Resolves mixed state inputs to unique 2-digit IBGE codes.

    Supported Inputs:
    - Codes: 35 (int), "35" (str)
    - Abbreviations: "SP", "sp"
    - Names: "São Paulo", "sao paulo"

    An empty or None input means the whole country and returns [].
    """
    if not states:
        return []

    if isinstance(states, (str, Integral)):
        states = [states]

    resolved: List[int] = []
    seen: Set[int] = set()

    for item in states:
        if isinstance(item, str) and not item.strip():
            raise ValueError(
                "Empty state input. Use an abbreviation (e.g., 'RJ') "
                "or IBGE code (33)."
            )

        # --- STRATEGY 1: Is it a Code? ---
        # bool is an Integral but never a state code
        if (isinstance(item, Integral) and not isinstance(item, bool)) or (
            isinstance(item, str) and item.strip().isdigit()
        ):
            code = int(item)
            if code not in STATES:
                raise ValueError(
                    f"Unknown IBGE state code: {code}. "
                    f"Valid codes: {sorted(STATES)}"
                )
        # --- STRATEGY 2: Abbreviation or Name ---
        elif isinstance(item, str):
            key = _normalize_text(item)
            if key not in _LOOKUP:
                possibilities = [
                    name for abbrev, name in STATES.values()
                    if _normalize_text(name).startswith(key[:3])
                ]
                msg = f"Could not resolve state: '{item}'."
                if possibilities:
                    msg += f" Did you mean: {possibilities}?"
                else:
                    msg += " Use an abbreviation (e.g., 'RJ') or IBGE code (33)."
                raise ValueError(msg)
            code = _LOOKUP[key]
            if key != _normalize_text(STATES[code][0]):
                logger.info(f"    ℹ️  Resolved '{item}' -> {STATES[code][0]} ({code})")
        else:
            raise ValueError(
                f"Invalid state format: '{item}'. "
                "Use an IBGE code (35), abbreviation ('SP') or name."
            )

        if code not in seen:
            seen.add(code)
            resolved.append(code)

    return resolved
